"""Dummy payment gateway."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_logger = logging.getLogger(__name__)

DUMMY_ORDER_ID = "ORDER12345"


class PaymentResult(BaseModel):
    """Outcome written to shared state under ``paymentResult``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    success: bool
    amount: Any = None
    """Amount as received from the page (number or decimal string)."""
    order_id: str | None = Field(default=None)

    def to_state(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class DummyPaymentGateway:
    """Always approves. Swap for a real checkout SDK in production."""

    def __init__(self, *, order_id: str = DUMMY_ORDER_ID) -> None:
        self._order_id = order_id

    async def charge(self, payment: dict[str, Any]) -> PaymentResult:
        _logger.debug("Charging dummy payment amount=%s", payment.get("amount"))
        return PaymentResult(success=True, amount=payment.get("amount"), order_id=self._order_id)
