"""Custom exception hierarchy for producthub."""

from __future__ import annotations

from typing import Any


class ProductHubError(Exception):
    """Base exception for all producthub errors."""


class ProductHubConfigError(ProductHubError):
    """Invalid or missing configuration."""


class ProductHubTransportError(ProductHubError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        operation: str = "",
    ) -> None:
        self.status_code = status_code
        self.operation = operation
        super().__init__(message)


class ProductHubGraphQLError(ProductHubError):
    """The backend answered with a non-empty ``errors`` list.

    ``errors`` holds the raw error objects as returned by the server.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        operation: str = "",
    ) -> None:
        self.errors = errors or []
        self.operation = operation
        super().__init__(message)
