"""Application bootstrap.

Builds one :class:`Bridge` per process and wires the native collaborators
around it: analytics, storefront client, message handlers, the custom widget
and deep links.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any

import aiohttp

from producthub.adapters.analytics import AnalyticsAdapter
from producthub.adapters.messages import CommerceMessageHandler, unknown_channel_notice
from producthub.bridge.context import Bridge
from producthub.bridge.lifecycle import Scope
from producthub.client import StorefrontClient
from producthub.config import AppConfig
from producthub.deeplinks import DeepLinkDispatcher
from producthub.exceptions import ProductHubError
from producthub.navigation import LoggingNotifier, Navigator, Notifier
from producthub.screens.cart import CartScreen
from producthub.widgets.delivery_type import register_delivery_type_widget
from producthub.widgets.registry import WidgetRegistry

_logger = logging.getLogger(__name__)


class ProductHubApp:
    """Process-wide application context.

    Usage::

        async with ProductHubApp(AppConfig.from_env()) as app:
            app.attach_navigator(navigator)   # first frame
            app.bridge.router.dispatch("add_to_cart", {"productId": "p1"})
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.config = config
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.analytics = AnalyticsAdapter(enabled=config.features.analytics)
        self.bridge = Bridge(fallback=unknown_channel_notice(self.notifier))
        self.client = StorefrontClient(config.storefront, session=session, analytics=self.analytics)
        self.widgets = WidgetRegistry()
        self.deep_links = DeepLinkDispatcher(self.notifier)
        self.messages = CommerceMessageHandler(
            self.bridge,
            self.analytics,
            client=self.client,
            enable_payments=config.features.payments,
            navigator=lambda: self._navigator,
        )
        self._navigator: Navigator | None = None
        self._scope = Scope("app")
        self._started = False

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ProductHubApp:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    async def start(self) -> None:
        """Start the app once. A stopped app cannot be restarted; build a new one."""
        if self._started:
            return
        if self._scope.disposed:
            raise ProductHubError("App already stopped. Create a new ProductHubApp to start again")
        _logger.info(
            "Starting producthub env=%s mode=%s branch=%s",
            self.config.environment,
            self.config.integration_mode,
            self.config.branch,
        )
        await self.client.__aenter__()
        register_delivery_type_widget(self.widgets)
        self.messages.install(self._scope)
        self._scope.add_callback(self.deep_links.dispose)
        self._started = True

    async def stop(self) -> None:
        if not self._started:
            return
        self._started = False
        self._scope.dispose()
        self._navigator = None
        await self.bridge.aclose()
        await self.client.close()

    # ------------------------------------------------------------------
    # Surfaces
    # ------------------------------------------------------------------

    @property
    def navigator(self) -> Navigator | None:
        return self._navigator

    def environment_variables(self) -> Mapping[str, str]:
        return self.config.environment_variables()

    def attach_navigator(self, navigator: Navigator) -> None:
        """Called once the first frame is up; replays deep links queued until now."""
        self._navigator = navigator
        self.deep_links.attach(navigator)

    def listen_for_links(self, links: AsyncIterator[str], *, initial: str | None = None) -> None:
        self.deep_links.handle_initial(initial)
        self.deep_links.start_listening(links)

    def open_cart_screen(self) -> CartScreen:
        if not self._started:
            raise ProductHubError("App not started. Use 'async with ProductHubApp(...) as app:'")
        screen = CartScreen(self.bridge, self.client, analytics=self.analytics)
        screen.mount()
        return screen
