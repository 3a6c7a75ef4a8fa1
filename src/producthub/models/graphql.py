"""The standard GraphQL ``{data, errors}`` response envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GraphQLErrorItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    message: str = ""
    path: list[str | int] | None = None
    extensions: dict[str, Any] = Field(default_factory=dict)


class UserError(BaseModel):
    """A mutation-level error (``userErrors`` in the mutation payload)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    field: list[str] | None = None
    message: str = ""
    code: str | None = None


class GraphQLResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    data: dict[str, Any] | None = None
    errors: list[GraphQLErrorItem] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error_summary(self) -> str:
        return "; ".join(error.message for error in self.errors if error.message) or "unknown error"

    def get(self, field: str) -> Any:
        """Top-level field of ``data`` (``None`` when absent)."""
        if not self.data:
            return None
        return self.data.get(field)
