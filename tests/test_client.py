from __future__ import annotations

from typing import Any

import aiohttp
import pytest

from producthub._transport import GraphQLTransport
from producthub.adapters.analytics import AnalyticsAdapter
from producthub.client import StorefrontClient
from producthub.config import StorefrontConfig
from producthub.exceptions import ProductHubError, ProductHubGraphQLError, ProductHubTransportError
from producthub.models.cart import CartLineInput, CartLineUpdateInput
from tests.fakes import FakeStorefrontBackend


class _FakeResponse:
    def __init__(self, status: int, text: str) -> None:
        self.status = status
        self._text = text

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeSession:
    def __init__(self, status: int = 200, text: str = "{}", error: Exception | None = None) -> None:
        self.status = status
        self.text = text
        self.error = error
        self.requests: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return _FakeResponse(self.status, self.text)


@pytest.mark.asyncio
async def test_transport_posts_graphql_body_with_token_header(storefront_config: StorefrontConfig) -> None:
    session = _FakeSession(text='{"data": {"cart": null}}')
    transport = GraphQLTransport(storefront_config, session)  # type: ignore[arg-type]

    result = await transport.post_graphql("query GetCart { cart }", {"cartId": "c1"}, operation_name="GetCart")

    assert result == {"data": {"cart": None}}
    request = session.requests[0]
    assert request["url"] == "https://digia-open-fashion.myshopify.com/api/2025-07/graphql.json"
    assert request["headers"]["X-Shopify-Storefront-Access-Token"] == "a28935969323"
    assert request["json"] == {
        "query": "query GetCart { cart }",
        "variables": {"cartId": "c1"},
        "operationName": "GetCart",
    }


@pytest.mark.asyncio
async def test_transport_omits_token_header_without_token() -> None:
    session = _FakeSession(text="{}")
    transport = GraphQLTransport(StorefrontConfig(store_name="shop"), session)  # type: ignore[arg-type]

    await transport.post_graphql("{ shop { name } }")

    assert "X-Shopify-Storefront-Access-Token" not in session.requests[0]["headers"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("session", "status_code"),
    [
        (_FakeSession(status=401, text="unauthorized"), 401),
        (_FakeSession(text="not json"), None),
        (_FakeSession(text="[1, 2]"), None),
        (_FakeSession(error=aiohttp.ClientConnectionError("refused")), None),
    ],
)
async def test_transport_failures_raise_transport_error(
    storefront_config: StorefrontConfig,
    session: _FakeSession,
    status_code: int | None,
) -> None:
    transport = GraphQLTransport(storefront_config, session)  # type: ignore[arg-type]

    with pytest.raises(ProductHubTransportError) as exc_info:
        await transport.post_graphql("{ cart }", operation_name="GetCart")

    assert exc_info.value.status_code == status_code
    assert exc_info.value.operation == "GetCart"


@pytest.mark.asyncio
async def test_get_cart_parses_connection_lines(
    storefront_config: StorefrontConfig,
    backend: FakeStorefrontBackend,
) -> None:
    backend.carts["gid://shopify/Cart/9"] = {"gid://shopify/ProductVariant/1": 2}

    async with StorefrontClient(storefront_config) as client:
        cart = await client.get_cart("gid://shopify/Cart/9")

    assert cart is not None
    assert cart.total_quantity == 2
    assert len(cart.lines) == 1
    assert cart.lines[0].merchandise is not None
    assert cart.lines[0].merchandise.on_sale
    assert cart.subtotal is not None and cart.subtotal.amount == "39.80"
    assert backend.operations() == ["GetCart"]


@pytest.mark.asyncio
async def test_get_cart_unknown_id_returns_none_without_error(
    storefront_config: StorefrontConfig,
    backend: FakeStorefrontBackend,
) -> None:
    analytics = AnalyticsAdapter()

    async with StorefrontClient(storefront_config, analytics=analytics) as client:
        assert await client.get_cart("gid://shopify/Cart/404") is None

    assert analytics.names() == []


@pytest.mark.asyncio
async def test_get_cart_without_id_reports_api_error(
    storefront_config: StorefrontConfig,
    backend: FakeStorefrontBackend,
) -> None:
    analytics = AnalyticsAdapter()

    async with StorefrontClient(storefront_config, analytics=analytics) as client:
        assert await client.get_cart(None) is None

    assert backend.calls == []
    assert analytics.events[0].name == "api_error"
    assert analytics.events[0].params["cart_id_provided"] is False


@pytest.mark.asyncio
async def test_graphql_errors_become_none_plus_api_error(
    storefront_config: StorefrontConfig,
    backend: FakeStorefrontBackend,
) -> None:
    backend.graphql_errors["GetCart"] = "Throttled"
    analytics = AnalyticsAdapter()

    async with StorefrontClient(storefront_config, analytics=analytics) as client:
        cart = await client.get_cart("gid://shopify/Cart/1")

    assert cart is None
    event = analytics.events[-1]
    assert event.name == "api_error"
    assert event.params["operation"] == "getCart"
    assert "Throttled" in event.params["error"]
    assert event.params["cart_id_provided"] is True


@pytest.mark.asyncio
async def test_http_failure_reports_status_code(
    storefront_config: StorefrontConfig,
    backend: FakeStorefrontBackend,
) -> None:
    backend.http_status["CreateCart"] = 503
    analytics = AnalyticsAdapter()

    async with StorefrontClient(storefront_config, analytics=analytics) as client:
        cart = await client.create_cart([CartLineInput(merchandise_id="gid://shopify/ProductVariant/1")])

    assert cart is None
    assert analytics.events[-1].params["status_code"] == 503
    assert analytics.events[-1].params["line_count"] == 1


@pytest.mark.asyncio
async def test_user_errors_reject_mutation(
    storefront_config: StorefrontConfig,
    backend: FakeStorefrontBackend,
) -> None:
    backend.carts["gid://shopify/Cart/1"] = {}
    backend.user_errors["AddCartLines"] = "Merchandise does not exist"
    analytics = AnalyticsAdapter()

    async with StorefrontClient(storefront_config, analytics=analytics) as client:
        cart = await client.add_cart_lines(
            "gid://shopify/Cart/1",
            [CartLineInput(merchandise_id="gid://shopify/ProductVariant/missing")],
        )

    assert cart is None
    assert "Merchandise does not exist" in analytics.events[-1].params["error"]


@pytest.mark.asyncio
async def test_cart_mutations_round_trip_through_backend(
    storefront_config: StorefrontConfig,
    backend: FakeStorefrontBackend,
) -> None:
    variant = "gid://shopify/ProductVariant/7"

    async with StorefrontClient(storefront_config) as client:
        created = await client.create_cart([CartLineInput(merchandise_id=variant, quantity=1)])
        assert created is not None
        added = await client.add_cart_lines(created.id, [CartLineInput(merchandise_id=variant, quantity=2)])
        assert added is not None and added.total_quantity == 3
        updated = await client.update_cart_lines(created.id, [CartLineUpdateInput(id=added.lines[0].id, quantity=0)])

    assert updated is not None
    assert updated.is_empty
    assert backend.calls[0][1] == {"lines": [{"merchandiseId": variant, "quantity": 1}]}
    assert backend.operations() == ["CreateCart", "AddCartLines", "UpdateCartLines"]


@pytest.mark.asyncio
async def test_execute_raises_graphql_error(
    storefront_config: StorefrontConfig,
    backend: FakeStorefrontBackend,
) -> None:
    backend.graphql_errors["Shop"] = "Access denied"

    async with StorefrontClient(storefront_config) as client:
        with pytest.raises(ProductHubGraphQLError) as exc_info:
            await client.execute("query Shop { shop { name } }", operation_name="Shop")

    assert exc_info.value.errors[0]["message"] == "Access denied"


@pytest.mark.asyncio
async def test_execute_requires_open_client(storefront_config: StorefrontConfig) -> None:
    client = StorefrontClient(storefront_config)

    with pytest.raises(ProductHubError):
        await client.execute("{ shop { name } }", operation_name="Shop")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("operation", "body"),
    [
        ("get_cart", {"data": {"cart": {"id": "c1", "totalQuantity": "many"}}}),
        ("create_cart", {"data": {"cartCreate": {"cart": None, "userErrors": [{"message": None}]}}}),
        ("create_cart", {"data": {"cartCreate": {"cart": {"lines": "nope"}, "userErrors": []}}}),
    ],
)
async def test_malformed_backend_body_becomes_none_plus_api_error(
    storefront_config: StorefrontConfig,
    monkeypatch: pytest.MonkeyPatch,
    operation: str,
    body: dict[str, Any],
) -> None:
    async def fake_post_graphql(_self: Any, *_args: Any, **_kwargs: Any) -> dict[str, Any]:
        return body

    monkeypatch.setattr("producthub._transport.GraphQLTransport.post_graphql", fake_post_graphql)
    analytics = AnalyticsAdapter()

    async with StorefrontClient(storefront_config, analytics=analytics) as client:
        if operation == "get_cart":
            cart = await client.get_cart("c1")
        else:
            cart = await client.create_cart()

    assert cart is None
    assert analytics.events[-1].name == "api_error"
    assert "malformed" in analytics.events[-1].params["error"]
