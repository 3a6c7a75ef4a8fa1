"""Delivery type status: a native text badge embedded in remote pages."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from producthub._constants import DELIVERY_TYPE_WIDGET_ID
from producthub.widgets.registry import WidgetRegistry


def parse_hex_color(value: Any) -> int:
    """Parse ``#RRGGBB`` (or ``#AARRGGBB``) into an opaque-by-default ARGB int."""
    if isinstance(value, int):
        return value
    text = str(value).strip().lstrip("#")
    if len(text) == 6:
        text = "ff" + text
    if len(text) != 8:
        raise ValueError(f"invalid color {value!r}")
    return int(text, 16)


class DeliveryTypeProps(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str
    color: int

    @field_validator("color", mode="before")
    @classmethod
    def _parse_color(cls, value: Any) -> int:
        return parse_hex_color(value)

    @property
    def color_hex(self) -> str:
        return f"#{self.color & 0xFFFFFF:06x}"


class DeliveryTypeStatus:
    ref_name = "custom_deliveryType"

    def __init__(self, props: DeliveryTypeProps) -> None:
        self.props = props

    def render(self) -> dict[str, Any]:
        return {
            "type": "text",
            "ref": self.ref_name,
            "text": self.props.title,
            "style": {"color": self.props.color_hex},
        }


def _parse(props: Mapping[str, Any]) -> DeliveryTypeProps:
    return DeliveryTypeProps.model_validate(dict(props))


def register_delivery_type_widget(registry: WidgetRegistry) -> None:
    registry.register_widget(DELIVERY_TYPE_WIDGET_ID, _parse, DeliveryTypeStatus)
