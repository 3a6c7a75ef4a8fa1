"""HTTP transport for GraphQL POST requests to the Storefront API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from producthub._constants import STOREFRONT_TOKEN_HEADER, USER_AGENT
from producthub._redact import redact_for_log
from producthub.config import StorefrontConfig
from producthub.exceptions import ProductHubTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the API modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`GraphQLTransport`) concrete.
    """

    async def post_graphql(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        *,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        ...


class GraphQLTransport:
    """POST GraphQL documents with token header authentication."""

    def __init__(self, config: StorefrontConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(
            sock_connect=config.connect_timeout,
            sock_read=config.read_timeout,
        )

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.access_token:
            headers[STOREFRONT_TOKEN_HEADER] = self._config.access_token
        return headers

    async def post_graphql(
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        *,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        """Send one GraphQL document and return the decoded response envelope.

        GraphQL-level ``errors`` are left in the envelope; only HTTP and
        decoding failures raise here.
        """
        operation = operation_name or "anonymous"
        body: dict[str, Any] = {"query": query, "variables": dict(variables or {})}
        if operation_name:
            body["operationName"] = operation_name

        url = self._config.endpoint
        _logger.debug("POST %s op=%s variables=%s", url, operation, redact_for_log(body["variables"]))

        try:
            async with self._http.post(url, json=body, headers=self._headers(), timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise ProductHubTransportError(
                        f"HTTP {resp.status} from {operation}: {text[:200]}",
                        status_code=resp.status,
                        operation=operation,
                    )
        except ProductHubTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise ProductHubTransportError(
                f"Request for {operation} failed: {exc}",
                operation=operation,
            ) from exc

        try:
            result = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ProductHubTransportError(
                f"Invalid JSON from {operation}: {text[:200]}",
                operation=operation,
            ) from exc

        if not isinstance(result, dict):
            raise ProductHubTransportError(
                f"Unexpected response shape from {operation}: {type(result).__name__}",
                operation=operation,
            )

        _logger.debug("Response for op=%s: %s", operation, redact_for_log(result, max_string=128))
        return result
