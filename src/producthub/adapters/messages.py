"""Native handlers for messages posted by remotely defined pages.

Each channel maps to one method. :meth:`CommerceMessageHandler.install`
registers all of them on the router under one owner scope, so that
unmounting the hosting component removes every registration at once.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from producthub._constants import CART_ID_KEY, CART_ITEM_COUNT_KEY, PAYMENT_RESULT_KEY
from producthub.adapters.analytics import AnalyticsAdapter
from producthub.adapters.payments import DummyPaymentGateway
from producthub.bridge.context import Bridge
from producthub.bridge.lifecycle import Scope
from producthub.bridge.router import Message
from producthub.client import StorefrontClient
from producthub.models.cart import Cart, CartLineInput, CartLineUpdateInput
from producthub.navigation import Navigator, Notifier, Route

_logger = logging.getLogger(__name__)

NavigatorProvider = Callable[[], "Navigator | None"]


def _as_dict(payload: Any) -> dict[str, Any]:
    return dict(payload) if isinstance(payload, Mapping) else {}


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def unknown_channel_notice(notifier: Notifier) -> Callable[[Message], None]:
    """Router fallback that shows a passive notice naming the channel."""

    def _fallback(message: Message) -> None:
        _logger.warning("Received message on unknown channel: %s", message.channel)
        notifier.show_notice(f"Received message on unknown channel: {message.channel}")

    return _fallback


class CommerceMessageHandler:
    """Payment, sharing, navigation, analytics and cart channels."""

    def __init__(
        self,
        bridge: Bridge,
        analytics: AnalyticsAdapter,
        *,
        client: StorefrontClient | None = None,
        payments: DummyPaymentGateway | None = None,
        enable_payments: bool = True,
        navigator: NavigatorProvider | None = None,
    ) -> None:
        self._bridge = bridge
        self._analytics = analytics
        self._client = client
        self._payments = payments or DummyPaymentGateway()
        self._enable_payments = enable_payments
        self._navigator = navigator or (lambda: None)
        self._scope: Scope | None = None

    @property
    def installed(self) -> bool:
        return self._scope is not None and not self._scope.disposed

    def channels(self) -> dict[str, Callable[[Any], Awaitable[None] | None]]:
        channels: dict[str, Callable[[Any], Awaitable[None] | None]] = {
            "start_payment": self.handle_payment,
            "share_product": self.handle_share,
            "open_url": self.handle_open_url,
            "log_event": self.handle_log_event,
            "open_cart": self.handle_open_cart,
            "add_to_cart": self.handle_add_to_cart,
            "update_cart": self.handle_update_cart,
        }
        if not self._enable_payments:
            del channels["start_payment"]
        return channels

    def install(self, scope: Scope | None = None) -> Scope:
        """Register every channel; dispose the returned scope to unregister."""
        scope = scope or Scope("message-handler")
        router = self._bridge.router
        for channel, handler in self.channels().items():
            scope.add(router.add_handler(channel, handler, owner=scope))
        self._scope = scope
        return scope

    def _alive(self) -> bool:
        return self.installed and not self._bridge.closed

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    async def handle_payment(self, payload: Any) -> None:
        result = await self._payments.charge(_as_dict(payload))
        if not self._alive():
            _logger.debug("Payment finished after unmount; result dropped")
            return
        self._bridge.store.update(PAYMENT_RESULT_KEY, result.to_state())
        self._analytics.log_event(
            "payment_attempt",
            {"success": result.success, "amount": result.amount, "order_id": result.order_id},
        )

    # ------------------------------------------------------------------
    # Share / URL
    # ------------------------------------------------------------------

    def handle_share(self, payload: Any) -> None:
        data = _as_dict(payload)
        url = data.get("url") or ""
        title = data.get("title") or ""
        text = data.get("text") or f"{title}\n{url}"
        _logger.info("Would share: %s", text)
        self._analytics.log_event("share", {"content_type": "product", "item_id": data.get("productId")})

    def handle_open_url(self, payload: Any) -> None:
        url = payload if isinstance(payload, str) else _as_dict(payload).get("url")
        if not url:
            _logger.warning("open_url without url: %r", payload)
            return
        _logger.info("Would open external url: %s", url)
        self._analytics.log_event("external_link_opened", {"url": url})

    # ------------------------------------------------------------------
    # Analytics
    # ------------------------------------------------------------------

    def handle_log_event(self, payload: Any) -> None:
        data = _as_dict(payload)
        params = data.get("params")
        self._analytics.log_event(
            str(data.get("name") or "custom_event"),
            params if isinstance(params, Mapping) else None,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def handle_open_cart(self, payload: Any) -> None:
        navigator = self._navigator()
        if navigator is None:
            _logger.warning("open_cart received before a navigator was attached")
            return
        navigator.push(Route.CART, {})

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    def handle_add_to_cart(self, payload: Any) -> Awaitable[None] | None:
        """Bump ``cartItemCount`` now; sync the line to the backend when possible."""
        data = _as_dict(payload)
        quantity = max(_as_int(data.get("quantity"), 1), 1)
        store = self._bridge.store
        store.update(CART_ITEM_COUNT_KEY, _as_int(store.get_value(CART_ITEM_COUNT_KEY)) + quantity)
        self._analytics.log_event("add_to_cart", {"product_id": data.get("productId"), "quantity": quantity})

        cart_id = store.get_value(CART_ID_KEY)
        merchandise_id = data.get("merchandiseId")
        if self._client is None or not merchandise_id:
            return None
        line = CartLineInput(merchandise_id=str(merchandise_id), quantity=quantity)
        if cart_id:
            return self._sync_cart(lambda client: client.add_cart_lines(str(cart_id), [line]))
        return self._sync_cart(lambda client: client.create_cart([line]))

    def handle_update_cart(self, payload: Any) -> Awaitable[None] | None:
        data = _as_dict(payload)
        cart_id = self._bridge.store.get_value(CART_ID_KEY)
        line_id = data.get("lineId")
        if self._client is None or not cart_id or not line_id:
            _logger.warning("update_cart ignored: cart=%s line=%s", cart_id, line_id)
            return None
        line = CartLineUpdateInput(id=str(line_id), quantity=max(_as_int(data.get("quantity")), 0))
        return self._sync_cart(lambda client: client.update_cart_lines(str(cart_id), [line]))

    async def _sync_cart(self, call: Callable[[StorefrontClient], Awaitable[Cart | None]]) -> None:
        client = self._client
        if client is None:
            return
        cart = await call(client)
        if cart is None or not self._alive():
            return
        store = self._bridge.store
        store.update(CART_ID_KEY, cart.id)
        store.update(CART_ITEM_COUNT_KEY, cart.total_quantity)
