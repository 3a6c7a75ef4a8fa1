"""Cart screen controller.

Fetches the cart named by the shared ``cartId`` and exposes what the screen
renders. Pages embedded in the screen toggle the loading overlay and ask for
a rebuild through messages; those handlers live exactly as long as the
screen is mounted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from producthub._constants import CART_ID_KEY, CART_LOADING_KEY
from producthub.adapters.analytics import AnalyticsAdapter
from producthub.bridge.context import Bridge
from producthub.bridge.lifecycle import Scope
from producthub.client import StorefrontClient
from producthub.models.cart import Cart

_logger = logging.getLogger(__name__)


class CartScreen:
    """State holder for the native cart screen."""

    screen_name = "cart"

    def __init__(
        self,
        bridge: Bridge,
        client: StorefrontClient,
        *,
        analytics: AnalyticsAdapter | None = None,
        on_rebuild: Callable[[], None] | None = None,
    ) -> None:
        self._bridge = bridge
        self._client = client
        self._analytics = analytics
        self._on_rebuild = on_rebuild
        self._scope: Scope | None = None
        self.cart: Cart | None = None
        self.is_loading = False
        self.rebuilds = 0

    @property
    def mounted(self) -> bool:
        return self._scope is not None and not self._scope.disposed

    def mount(self) -> Scope:
        if self.mounted:
            assert self._scope is not None  # noqa: S101
            return self._scope
        scope = Scope(self.screen_name)
        router = self._bridge.router
        scope.add(router.add_handler("rebuild_screen", self._handle_rebuild, owner=self))
        scope.add(router.add_handler("rebuild_isLoading_true", self._handle_loading_on, owner=self))
        scope.add(router.add_handler("rebuild_isLoading_false", self._handle_loading_off, owner=self))
        self._scope = scope
        if self._analytics is not None:
            self._analytics.log_screen_view(self.screen_name)
        return scope

    def unmount(self) -> None:
        scope = self._scope
        if scope is not None:
            scope.dispose()

    async def load(self) -> Cart | None:
        """Fetch the current cart; the result is dropped if unmounted meanwhile."""
        cart_id = self._bridge.store.get_value(CART_ID_KEY)
        cart = await self._client.get_cart(cart_id)
        if not self.mounted:
            _logger.debug("Cart loaded after unmount; discarding")
            return None
        self.cart = cart
        self._rebuild()
        return cart

    def view(self) -> dict[str, Any]:
        """What the screen shows: line props for page components plus totals."""
        cart = self.cart
        if cart is None or cart.is_empty:
            return {"empty": True, "isLoading": self.is_loading, "lines": [], "total": "0.00", "checkoutUrl": None}
        subtotal = cart.subtotal
        return {
            "empty": False,
            "isLoading": self.is_loading,
            "lines": [line.as_component_props() for line in cart.lines],
            "total": subtotal.amount if subtotal else "0.00",
            "checkoutUrl": cart.checkout_url,
        }

    def _rebuild(self) -> None:
        self.rebuilds += 1
        if self._on_rebuild is not None:
            self._on_rebuild()

    def _set_loading(self, value: bool) -> None:
        self.is_loading = value
        self._bridge.store.update(CART_LOADING_KEY, value)
        self._rebuild()

    def _handle_rebuild(self, _payload: Any) -> None:
        self._rebuild()

    def _handle_loading_on(self, _payload: Any) -> None:
        self._set_loading(True)

    def _handle_loading_off(self, _payload: Any) -> None:
        self._set_loading(False)
