"""Shared helpers for Storefront API modules.

- posting a GraphQL document through a transport
- validating the ``{data, errors}`` envelope
- mapping mutation ``userErrors`` to exceptions

It is internal to producthub and may change at any time.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from producthub._transport import Transport
from producthub.exceptions import ProductHubGraphQLError
from producthub.models.graphql import GraphQLResponse, UserError


async def execute(
    transport: Transport,
    query: str,
    variables: Mapping[str, Any] | None = None,
    *,
    operation_name: str,
) -> GraphQLResponse:
    """Post *query* and return the envelope; raise when ``errors`` is non-empty."""
    raw = await transport.post_graphql(query, variables, operation_name=operation_name)
    try:
        response = GraphQLResponse.model_validate(raw)
    except ValidationError as exc:
        raise ProductHubGraphQLError(
            f"{operation_name} returned a malformed envelope",
            operation=operation_name,
        ) from exc
    if not response.ok:
        raise ProductHubGraphQLError(
            f"{operation_name} failed: {response.error_summary()}",
            errors=[error.model_dump() for error in response.errors],
            operation=operation_name,
        )
    return response


def mutation_payload(response: GraphQLResponse, field: str, *, operation_name: str) -> dict[str, Any]:
    """Return ``data[field]`` of a mutation, raising on ``userErrors``."""
    payload = response.get(field)
    if not isinstance(payload, dict):
        raise ProductHubGraphQLError(
            f"{operation_name} returned no {field} payload",
            operation=operation_name,
        )
    try:
        user_errors = [UserError.model_validate(item) for item in payload.get("userErrors") or []]
    except ValidationError as exc:
        raise ProductHubGraphQLError(
            f"{operation_name} returned malformed userErrors",
            operation=operation_name,
        ) from exc
    if user_errors:
        raise ProductHubGraphQLError(
            f"{operation_name} rejected: " + "; ".join(err.message for err in user_errors),
            errors=[err.model_dump() for err in user_errors],
            operation=operation_name,
        )
    return payload
