"""Native widgets exposed to remotely defined pages."""

from producthub.widgets.delivery_type import DeliveryTypeProps, DeliveryTypeStatus, register_delivery_type_widget
from producthub.widgets.registry import WidgetRegistry

__all__ = [
    "DeliveryTypeProps",
    "DeliveryTypeStatus",
    "WidgetRegistry",
    "register_delivery_type_widget",
]
