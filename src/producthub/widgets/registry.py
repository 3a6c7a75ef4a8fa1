"""Registry of native widgets that remotely defined pages can reference."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

_logger = logging.getLogger(__name__)

P = TypeVar("P")

PropsParser = Callable[[Mapping[str, Any]], P]
WidgetBuilder = Callable[[P], Any]


@dataclass(slots=True, frozen=True)
class WidgetRegistration(Generic[P]):
    type_id: str
    parse_props: PropsParser[P]
    build: WidgetBuilder[P]


class WidgetRegistry:
    """Map a page-side widget type id to a props parser and a builder."""

    def __init__(self) -> None:
        self._widgets: dict[str, WidgetRegistration[Any]] = {}

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._widgets

    def register_widget(self, type_id: str, parse_props: PropsParser[P], build: WidgetBuilder[P]) -> None:
        if type_id in self._widgets:
            _logger.debug("Replacing widget registration for %s", type_id)
        self._widgets[type_id] = WidgetRegistration(type_id, parse_props, build)

    def create(self, type_id: str, props: Mapping[str, Any]) -> Any:
        """Parse *props* and build the widget registered as *type_id*.

        Raises
        ------
        KeyError
            When nothing is registered under *type_id*.
        """
        registration = self._widgets.get(type_id)
        if registration is None:
            raise KeyError(f"No widget registered for {type_id!r}")
        return registration.build(registration.parse_props(props))
