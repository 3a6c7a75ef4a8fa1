"""Deep link resolution and dispatch.

``app://cart`` and ``https://shop.example/cart`` resolve to the same action:
for custom schemes the authority is treated as the first path segment.
The first segment is looked up in a small route table; an empty path goes
home silently and anything unknown goes home with a passive notice.

Links are handled one at a time on the event loop. Links that arrive before
a navigator is attached (the first frame) are queued and replayed in order
by :meth:`DeepLinkDispatcher.attach`.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import AsyncIterator, Mapping
from urllib.parse import parse_qsl, unquote, urlsplit

from producthub.navigation import (
    NavigationAction,
    NavigationKind,
    Navigator,
    Notifier,
    Route,
    apply_action,
)

_logger = logging.getLogger(__name__)

_WEB_SCHEMES = frozenset({"http", "https"})

DEFAULT_ROUTES: Mapping[str, Route] = {
    "home": Route.HOME,
    "cart": Route.CART,
}


def path_segments(uri: str) -> list[str]:
    parts = urlsplit(uri)
    segments = [unquote(segment) for segment in parts.path.split("/") if segment]
    if parts.scheme.lower() not in _WEB_SCHEMES and parts.netloc:
        segments.insert(0, unquote(parts.netloc))
    return segments


def resolve_deep_link(uri: str, routes: Mapping[str, Route] = DEFAULT_ROUTES) -> NavigationAction:
    """Map *uri* to a navigation action without side effects."""
    parts = urlsplit(uri)
    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    segments = path_segments(uri)

    if not segments:
        return NavigationAction(kind=NavigationKind.POP_TO_ROOT, params=params)

    route = routes.get(segments[0])
    if route is None:
        return NavigationAction(
            kind=NavigationKind.POP_TO_ROOT,
            params=params,
            notice=f"Deep link not recognized: /{'/'.join(segments)}",
        )
    return NavigationAction(kind=NavigationKind.PUSH, route=route, params=params)


class DeepLinkDispatcher:
    """Apply resolved deep links to a navigator, one at a time."""

    def __init__(
        self,
        notifier: Notifier,
        *,
        navigator: Navigator | None = None,
        routes: Mapping[str, Route] = DEFAULT_ROUTES,
    ) -> None:
        self._notifier = notifier
        self._navigator = navigator
        self._routes = routes
        self._queue: deque[str] = deque()
        self._processing = False
        self._listener: asyncio.Task[None] | None = None

    @property
    def ready(self) -> bool:
        return self._navigator is not None

    @property
    def queued(self) -> int:
        return len(self._queue)

    def attach(self, navigator: Navigator) -> None:
        """Bind the navigator once the first frame is up and replay queued links."""
        self._navigator = navigator
        if self._queue:
            _logger.debug("Navigator attached; replaying %d queued deep link(s)", len(self._queue))
        self._drain()

    def detach(self) -> None:
        self._navigator = None

    def handle(self, uri: str) -> None:
        """Queue *uri* and process the queue if nothing else is running."""
        _logger.debug("Received deep link: %s", uri)
        self._queue.append(uri)
        self._drain()

    def handle_initial(self, uri: str | None) -> None:
        """Handle the link the app was cold-started with, if any."""
        if uri:
            self.handle(uri)

    def _drain(self) -> None:
        if self._processing:
            return
        self._processing = True
        try:
            while self._queue and self._navigator is not None:
                self._process(self._navigator, self._queue.popleft())
        finally:
            self._processing = False

    def _process(self, navigator: Navigator, uri: str) -> None:
        try:
            action = resolve_deep_link(uri, self._routes)
        except ValueError:
            _logger.warning("Malformed deep link: %s", uri, exc_info=True)
            action = NavigationAction(
                kind=NavigationKind.POP_TO_ROOT,
                notice=f"Deep link not recognized: {uri}",
            )
        if action.notice is not None:
            self._notifier.show_notice(action.notice)
        try:
            apply_action(navigator, action)
        except Exception:
            _logger.exception("Navigation for deep link %s failed", uri)

    # ------------------------------------------------------------------
    # Link stream (links delivered while the app is running)
    # ------------------------------------------------------------------

    async def listen(self, links: AsyncIterator[str]) -> None:
        """Handle every link from *links* until the stream ends or fails."""
        try:
            async for uri in links:
                self.handle(uri)
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.warning("Deep link stream failed", exc_info=True)

    def start_listening(self, links: AsyncIterator[str]) -> asyncio.Task[None]:
        if self._listener is not None and not self._listener.done():
            self._listener.cancel()
        self._listener = asyncio.create_task(self.listen(links))
        return self._listener

    def dispose(self) -> None:
        """Stop listening, detach the navigator and drop queued links."""
        listener = self._listener
        self._listener = None
        if listener is not None and not listener.done():
            listener.cancel()
        self._navigator = None
        self._queue.clear()
