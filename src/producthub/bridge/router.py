"""Named-channel message router between the dynamic UI layer and native code.

Handlers are kept in a map of channel -> ordered registrations. Dispatch
walks a snapshot of that list, so handlers may be added or removed while a
dispatch is running:

- a registration removed mid-dispatch is skipped,
- a registration added mid-dispatch only sees later messages.

A handler may return an awaitable. It is scheduled on the running event
loop and awaited in the background; ``dispatch`` itself never suspends and
never raises. Failures are logged per handler.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], "Awaitable[None] | None"]
FallbackHandler = Callable[["Message"], None]


class Message(BaseModel):
    """A message posted by a page. Exists only for the duration of dispatch."""

    model_config = ConfigDict(frozen=True)

    channel: str = Field(..., description="Channel name agreed between page authors and native code")
    payload: Any = None


class HandlerRegistration:
    """One handler bound to one channel, optionally tagged with an owner."""

    __slots__ = ("channel", "handler", "owner", "_router")

    def __init__(self, router: MessageRouter, channel: str, handler: MessageHandler, owner: object | None) -> None:
        self.channel = channel
        self.handler = handler
        self.owner = owner
        self._router: MessageRouter | None = router

    def __repr__(self) -> str:
        return f"HandlerRegistration(channel={self.channel!r}, handler={_handler_name(self.handler)}, active={self.active})"

    @property
    def active(self) -> bool:
        return self._router is not None

    def cancel(self) -> None:
        """Unregister. Calling it again is a no-op."""
        router = self._router
        if router is None:
            return
        router._discard(self)  # noqa: SLF001

    def _detach(self) -> None:
        self._router = None


def _handler_name(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__qualname__", None) or getattr(handler, "__name__", None) or repr(handler)


def _log_unrouted(message: Message) -> None:
    _logger.warning("Received message on unknown channel: %s", message.channel)


class MessageRouter:
    """Registration table plus dispatch for named channels.

    Parameters
    ----------
    fallback : callable, optional
        Invoked exactly once with the :class:`Message` when a channel has no
        handler. Defaults to a warning log line.
    """

    def __init__(self, *, fallback: FallbackHandler | None = None) -> None:
        self._handlers: dict[str, list[HandlerRegistration]] = {}
        self._fallback: FallbackHandler = fallback or _log_unrouted
        self._pending: set[asyncio.Future[Any]] = set()

    @property
    def handler_count(self) -> int:
        """Number of live registrations across all channels."""
        return sum(len(regs) for regs in self._handlers.values())

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def channels(self) -> list[str]:
        return list(self._handlers)

    def has_handlers(self, channel: str) -> bool:
        return bool(self._handlers.get(channel))

    def set_fallback(self, fallback: FallbackHandler | None) -> None:
        self._fallback = fallback or _log_unrouted

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_handler(self, channel: str, handler: MessageHandler, *, owner: object | None = None) -> HandlerRegistration:
        """Append *handler* to *channel*. The same handler may be added twice."""
        registration = HandlerRegistration(self, channel, handler, owner)
        self._handlers.setdefault(channel, []).append(registration)
        return registration

    def remove_handler(self, channel: str, handler: MessageHandler) -> bool:
        """Remove the earliest registration of *handler* on *channel*."""
        for registration in self._handlers.get(channel, ()):
            if registration.handler is handler:
                self._discard(registration)
                return True
        return False

    def remove_all_for_owner(self, owner: object) -> int:
        """Remove every registration tagged with *owner*; return how many."""
        removed = 0
        for registrations in list(self._handlers.values()):
            for registration in list(registrations):
                if registration.owner is owner:
                    self._discard(registration)
                    removed += 1
        return removed

    def _discard(self, registration: HandlerRegistration) -> None:
        registration._detach()  # noqa: SLF001
        registrations = self._handlers.get(registration.channel)
        if registrations is None:
            return
        registrations[:] = [r for r in registrations if r is not registration]
        if not registrations:
            del self._handlers[registration.channel]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(self, channel: str, payload: Any = None) -> Message:
        """Deliver a message to every handler currently registered on *channel*."""
        if not isinstance(channel, str):
            _logger.warning("Message channel %r is not a string; routing as %r", channel, str(channel))
            channel = str(channel)
        message = Message(channel=channel, payload=payload)
        snapshot = list(self._handlers.get(channel, ()))

        if not snapshot:
            try:
                self._fallback(message)
            except Exception:
                _logger.exception("Fallback handler failed for channel=%s", channel)
            return message

        _logger.debug("Dispatching channel=%s to %d handler(s)", channel, len(snapshot))
        for registration in snapshot:
            if not registration.active:
                continue
            name = _handler_name(registration.handler)
            try:
                result = registration.handler(payload)
            except Exception:
                _logger.exception("Handler %s failed for channel=%s", name, channel)
                continue
            if inspect.isawaitable(result):
                self._schedule(channel, name, result)
        return message

    def _schedule(self, channel: str, name: str, awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.error("Handler %s for channel=%s returned an awaitable but no event loop is running", name, channel)
            close = getattr(awaitable, "close", None)
            if callable(close):
                close()
            return
        future = asyncio.ensure_future(awaitable, loop=loop)

        def _done(fut: asyncio.Future[Any]) -> None:
            self._pending.discard(fut)
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                _logger.error("Async handler %s failed for channel=%s", name, channel, exc_info=exc)

        self._pending.add(future)
        future.add_done_callback(_done)

    async def drain(self) -> None:
        """Wait until every scheduled async handler has finished."""
        while True:
            pending = [fut for fut in self._pending if not fut.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        """Drop every registration and cancel outstanding async handler work."""
        for registrations in list(self._handlers.values()):
            for registration in list(registrations):
                self._discard(registration)
        self._handlers.clear()
        for future in list(self._pending):
            future.cancel()
