"""Double-brace bindings from page text to shared state.

A page text such as ``"Items: {{cartItemCount}}"`` or
``"Paid {{ paymentResult.amount }}"`` is resolved against the store:
the first path segment is a store key, the rest walk into mappings or
sequences. Unresolvable paths and ``None`` render as an empty string;
everything else is stringified.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any

from producthub.bridge.state import StateStore

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][\w-]*(?:\.[\w-]+)*)\s*\}\}")

_MISSING = object()


def resolve_path(store: StateStore, path: str) -> Any:
    """Return the value at dotted *path*, or ``None`` when any segment is absent."""
    key, *rest = path.split(".")
    value = store.get_value(key, _MISSING)
    for segment in rest:
        if value is _MISSING or value is None:
            break
        if isinstance(value, Mapping):
            value = value.get(segment, _MISSING)
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and segment.isdecimal():
            index = int(segment)
            value = value[index] if index < len(value) else _MISSING
        else:
            value = _MISSING
    return None if value is _MISSING else value


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def placeholders(text: str) -> list[str]:
    """List the dotted paths referenced by *text*, in order of appearance."""
    return [match.group(1) for match in _PLACEHOLDER.finditer(text)]


def interpolate(text: str, store: StateStore) -> str:
    return _PLACEHOLDER.sub(lambda match: _stringify(resolve_path(store, match.group(1))), text)
