"""Cart queries and mutations."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import ValidationError

from producthub._api import queries
from producthub._api._common import execute, mutation_payload
from producthub._transport import Transport
from producthub.exceptions import ProductHubGraphQLError
from producthub.models.cart import Cart, CartLineInput, CartLineUpdateInput


def _cart_or_none(value: object, *, operation_name: str) -> Cart | None:
    if not isinstance(value, dict):
        return None
    try:
        return Cart.model_validate(value)
    except ValidationError as exc:
        raise ProductHubGraphQLError(
            f"{operation_name} returned a malformed cart",
            operation=operation_name,
        ) from exc


async def fetch_cart(transport: Transport, cart_id: str) -> Cart | None:
    """Fetch a cart by global id. ``None`` when the backend does not know it."""
    response = await execute(
        transport,
        queries.GET_CART,
        {"cartId": cart_id},
        operation_name="GetCart",
    )
    return _cart_or_none(response.get("cart"), operation_name="GetCart")


async def create_cart(transport: Transport, lines: Iterable[CartLineInput] = ()) -> Cart | None:
    response = await execute(
        transport,
        queries.CREATE_CART,
        {"lines": [line.to_variables() for line in lines]},
        operation_name="CreateCart",
    )
    payload = mutation_payload(response, "cartCreate", operation_name="CreateCart")
    return _cart_or_none(payload.get("cart"), operation_name="CreateCart")


async def add_cart_lines(transport: Transport, cart_id: str, lines: Iterable[CartLineInput]) -> Cart | None:
    response = await execute(
        transport,
        queries.ADD_CART_LINES,
        {"cartId": cart_id, "lines": [line.to_variables() for line in lines]},
        operation_name="AddCartLines",
    )
    payload = mutation_payload(response, "cartLinesAdd", operation_name="AddCartLines")
    return _cart_or_none(payload.get("cart"), operation_name="AddCartLines")


async def update_cart_lines(
    transport: Transport,
    cart_id: str,
    lines: Iterable[CartLineUpdateInput],
) -> Cart | None:
    response = await execute(
        transport,
        queries.UPDATE_CART_LINES,
        {"cartId": cart_id, "lines": [line.to_variables() for line in lines]},
        operation_name="UpdateCartLines",
    )
    payload = mutation_payload(response, "cartLinesUpdate", operation_name="UpdateCartLines")
    return _cart_or_none(payload.get("cart"), operation_name="UpdateCartLines")
