"""High-level async client for the Storefront commerce backend."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, TypeVar

import aiohttp

from producthub._api import cart as _cart_api
from producthub._api._common import execute
from producthub._transport import GraphQLTransport
from producthub.adapters.analytics import AnalyticsAdapter
from producthub.config import StorefrontConfig
from producthub.exceptions import ProductHubError, ProductHubTransportError
from producthub.models.cart import Cart, CartLineInput, CartLineUpdateInput
from producthub.models.graphql import GraphQLResponse

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class StorefrontClient:
    """Async client for cart operations.

    Cart methods never raise: a failed call is logged, reported to analytics
    as ``api_error`` and returns ``None``. :meth:`execute` is the raising
    primitive underneath.

    Usage::

        async with StorefrontClient(config.storefront, analytics=analytics) as client:
            cart = await client.get_cart("gid://shopify/Cart/123")
    """

    def __init__(
        self,
        config: StorefrontConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        analytics: AnalyticsAdapter | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._analytics = analytics or AnalyticsAdapter()
        self._transport: GraphQLTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> StorefrontClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = GraphQLTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    @property
    def is_open(self) -> bool:
        return self._transport is not None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> GraphQLTransport:
        if self._transport is None:
            raise ProductHubError("Client not initialized. Use 'async with StorefrontClient(...) as client:'")
        return self._transport

    async def _guarded(
        self,
        operation: str,
        fn: Callable[[GraphQLTransport], Awaitable[T]],
        **context: Any,
    ) -> T | None:
        """Run *fn*; convert any producthub failure into ``None`` plus an analytics event."""
        try:
            return await fn(self._require_transport())
        except ProductHubError as exc:
            _logger.warning("%s failed: %s", operation, exc)
            params: dict[str, Any] = {"operation": operation, "error": str(exc), **context}
            if isinstance(exc, ProductHubTransportError) and exc.status_code is not None:
                params["status_code"] = exc.status_code
            self._analytics.log_event("api_error", params)
            return None

    # ------------------------------------------------------------------
    # Raw GraphQL
    # ------------------------------------------------------------------

    async def execute(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        *,
        operation_name: str,
    ) -> GraphQLResponse:
        """Run any GraphQL document. Raises on transport or GraphQL errors."""
        return await execute(self._require_transport(), query, variables, operation_name=operation_name)

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    async def get_cart(self, cart_id: str | None) -> Cart | None:
        """Fetch a cart. ``None`` when it is unknown or the call failed."""
        if not cart_id:
            self._analytics.log_event(
                "api_error",
                {"operation": "getCart", "error": "missing cart id", "cart_id_provided": False},
            )
            return None
        return await self._guarded(
            "getCart",
            lambda transport: _cart_api.fetch_cart(transport, cart_id),
            cart_id_provided=True,
        )

    async def create_cart(self, lines: Iterable[CartLineInput] = ()) -> Cart | None:
        line_list = list(lines)
        return await self._guarded(
            "createCart",
            lambda transport: _cart_api.create_cart(transport, line_list),
            line_count=len(line_list),
        )

    async def add_cart_lines(self, cart_id: str, lines: Iterable[CartLineInput]) -> Cart | None:
        line_list = list(lines)
        return await self._guarded(
            "addCartLines",
            lambda transport: _cart_api.add_cart_lines(transport, cart_id, line_list),
            line_count=len(line_list),
        )

    async def update_cart_lines(self, cart_id: str, lines: Iterable[CartLineUpdateInput]) -> Cart | None:
        line_list = list(lines)
        return await self._guarded(
            "updateCartLines",
            lambda transport: _cart_api.update_cart_lines(transport, cart_id, line_list),
            line_count=len(line_list),
        )
