"""The bridge object shared by every component of one app process."""

from __future__ import annotations

import logging

from producthub.bridge.router import FallbackHandler, MessageRouter
from producthub.bridge.state import StateStore

_logger = logging.getLogger(__name__)


class Bridge:
    """Shared state store plus message router.

    Created once when the app starts and closed when it exits. Components
    receive it explicitly instead of reaching for a module-level global.
    """

    def __init__(self, *, fallback: FallbackHandler | None = None) -> None:
        self.store = StateStore()
        self.router = MessageRouter(fallback=fallback)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def leak_report(self) -> dict[str, int]:
        """Live subscription and handler counts (zero after every unmount)."""
        return {
            "subscriptions": self.store.subscription_count,
            "handlers": self.router.handler_count,
        }

    async def aclose(self) -> None:
        """Let in-flight async handlers finish, then close."""
        await self.router.drain()
        self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        leaks = self.leak_report()
        if any(leaks.values()):
            _logger.debug("Closing bridge with live registrations: %s", leaks)
        self.router.close()
        self.store.close()
