"""Base model for Storefront API responses.

Every response model inherits from :class:`StorefrontModel` which provides:

* ``alias_generator=to_camel`` so camelCase GraphQL fields map
  automatically to snake_case attributes.
* A ``model_validator(mode="before")`` that flattens GraphQL connection
  objects (``{"edges": [{"node": ...}]}``) into plain lists for the fields
  listed in ``_CONNECTION_FIELDS``.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def unwrap_connection(value: Any) -> Any:
    """Turn ``{"edges": [{"node": x}, ...]}`` into ``[x, ...]``.

    Values that are not connection-shaped are returned unchanged.
    """
    if isinstance(value, dict) and "edges" in value:
        edges = value.get("edges") or []
        return [edge.get("node") for edge in edges if isinstance(edge, dict) and edge.get("node") is not None]
    if isinstance(value, dict) and "nodes" in value:
        return list(value.get("nodes") or [])
    return value


class StorefrontModel(BaseModel):
    """Base for Storefront GraphQL response objects."""

    _CONNECTION_FIELDS: ClassVar[frozenset[str]] = frozenset()
    """camelCase keys holding GraphQL connections to flatten."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _flatten_connections(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = {key: value for key, value in original.items() if value is not None}
        for key in getattr(cls, "_CONNECTION_FIELDS", frozenset()):
            if key in cleaned:
                cleaned[key] = unwrap_connection(cleaned[key])
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
