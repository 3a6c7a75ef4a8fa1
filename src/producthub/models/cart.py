"""Cart models for the Storefront ``cart`` object and cart mutations."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from producthub.models._base import StorefrontModel


class Money(StorefrontModel):
    """A decimal amount with its currency, as the API returns it."""

    amount: str = "0"
    """Decimal amount as a string (e.g. ``"19.90"``)."""
    currency_code: str = ""
    """ISO 4217 code (e.g. ``"USD"``)."""

    @property
    def value(self) -> Decimal:
        try:
            return Decimal(self.amount)
        except InvalidOperation:
            return Decimal(0)


class Image(StorefrontModel):
    url: str = ""
    alt_text: str | None = None


class ProductRef(StorefrontModel):
    title: str = ""
    handle: str = ""


class Merchandise(StorefrontModel):
    """The product variant a cart line points to."""

    id: str = ""
    title: str = ""
    price: Money | None = None
    compare_at_price: Money | None = None
    image: Image | None = None
    product: ProductRef | None = None

    @property
    def on_sale(self) -> bool:
        if self.price is None or self.compare_at_price is None:
            return False
        return self.compare_at_price.value > self.price.value


class CartLine(StorefrontModel):
    id: str = ""
    quantity: int = 0
    merchandise: Merchandise | None = None

    def as_component_props(self) -> dict[str, Any]:
        """Props for the ``checkout_card`` page component."""
        merchandise = self.merchandise
        return {
            "imgUrl": merchandise.image.url if merchandise and merchandise.image else "",
            "productName": merchandise.product.title if merchandise and merchandise.product else "",
            "discountedprice": merchandise.price.amount if merchandise and merchandise.price else "",
            "quantity": self.quantity,
            "cartLineItemId": self.id,
            "productObj": self.raw,
        }


class CartCost(StorefrontModel):
    subtotal_amount: Money | None = None
    total_amount: Money | None = None


class DiscountCode(StorefrontModel):
    code: str = ""
    applicable: bool = False


class DiscountAllocation(StorefrontModel):
    discounted_amount: Money | None = None


class Cart(StorefrontModel):
    """A Storefront cart.

    ``lines`` arrives as a GraphQL connection and is flattened into a list.
    """

    _CONNECTION_FIELDS: ClassVar[frozenset[str]] = frozenset({"lines"})

    id: str = ""
    checkout_url: str | None = None
    total_quantity: int = 0
    cost: CartCost | None = None
    lines: list[CartLine] = Field(default_factory=list)
    discount_codes: list[DiscountCode] = Field(default_factory=list)
    discount_allocations: list[DiscountAllocation] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def subtotal(self) -> Money | None:
        return self.cost.subtotal_amount if self.cost else None


class _InputModel(BaseModel):
    """Base for mutation inputs, serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_variables(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CartLineInput(_InputModel):
    merchandise_id: str
    quantity: int = Field(default=1, ge=1)


class CartLineUpdateInput(_InputModel):
    id: str
    quantity: int = Field(..., ge=0)
