from __future__ import annotations

import pytest
from pydantic import ValidationError

from producthub.widgets import DeliveryTypeStatus, WidgetRegistry, register_delivery_type_widget
from producthub.widgets.delivery_type import parse_hex_color

WIDGET_ID = "custom/deliverytype-1BsfGx"


def test_parse_hex_color() -> None:
    assert parse_hex_color("#1BA672") == 0xFF1BA672
    assert parse_hex_color("801ba672") == 0x801BA672
    assert parse_hex_color(0xFF000000) == 0xFF000000
    with pytest.raises(ValueError):
        parse_hex_color("#123")


def test_registry_builds_delivery_type_from_page_props() -> None:
    registry = WidgetRegistry()
    register_delivery_type_widget(registry)

    widget = registry.create(WIDGET_ID, {"title": "Express delivery", "color": "#1BA672", "unused": 1})

    assert WIDGET_ID in registry
    assert isinstance(widget, DeliveryTypeStatus)
    assert widget.render() == {
        "type": "text",
        "ref": "custom_deliveryType",
        "text": "Express delivery",
        "style": {"color": "#1ba672"},
    }


def test_bad_props_raise_validation_error() -> None:
    registry = WidgetRegistry()
    register_delivery_type_widget(registry)

    with pytest.raises(ValidationError):
        registry.create(WIDGET_ID, {"title": "x", "color": "green"})


def test_unknown_widget_raises_key_error() -> None:
    with pytest.raises(KeyError):
        WidgetRegistry().create("custom/unknown", {})
