"""Navigation seams used by deep links and message handlers.

The navigation chrome itself belongs to the UI toolkit; native code only
sees the :class:`Navigator` and :class:`Notifier` protocols.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

_logger = logging.getLogger(__name__)


class Route(StrEnum):
    HOME = "home"
    CART = "cart"


class NavigationKind(StrEnum):
    PUSH = "push"
    POP_TO_ROOT = "pop_to_root"


class NavigationAction(BaseModel):
    """What a deep link (or message) asked the navigator to do."""

    model_config = ConfigDict(frozen=True)

    kind: NavigationKind
    route: Route = Route.HOME
    params: dict[str, str] = Field(default_factory=dict)
    notice: str | None = Field(default=None, description="Passive notice shown to the user, if any")


class Navigator(Protocol):
    def push(self, route: Route, params: Mapping[str, str]) -> None:
        ...

    def pop_to_root(self) -> None:
        ...


class Notifier(Protocol):
    """Passive, dismissible user notices (banners/snackbars)."""

    def show_notice(self, text: str) -> None:
        ...


class LoggingNotifier:
    """Notifier used when no UI surface is attached."""

    def show_notice(self, text: str) -> None:
        _logger.info("Notice: %s", text)


def apply_action(navigator: Navigator, action: NavigationAction) -> None:
    if action.kind is NavigationKind.PUSH:
        navigator.push(action.route, action.params)
    else:
        navigator.pop_to_root()
