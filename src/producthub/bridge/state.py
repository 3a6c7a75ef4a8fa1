"""Process-wide shared state store.

Native code and the dynamic UI layer both read and write this flat
key -> value map. Consistency model is "last write wins": there is no
history, no versioning and no validation of value shapes.

``listen`` does not replay the current value. Read it with ``get_value``
first, then listen for later changes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

_logger = logging.getLogger(__name__)

StateCallback = Callable[[Any], None]


class Subscription:
    """Handle returned by :meth:`StateStore.listen`."""

    __slots__ = ("key", "callback", "_store")

    def __init__(self, store: StateStore, key: str, callback: StateCallback) -> None:
        self.key = key
        self.callback = callback
        self._store: StateStore | None = store

    def __repr__(self) -> str:
        return f"Subscription(key={self.key!r}, active={self.active})"

    @property
    def active(self) -> bool:
        return self._store is not None

    def cancel(self) -> None:
        """Remove the subscription. Calling it again is a no-op."""
        store = self._store
        if store is None:
            return
        self._store = None
        store._discard(self)  # noqa: SLF001


class StateStore:
    """Flat key -> value store with per-key change notification."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._subscriptions: dict[str, list[Subscription]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    @property
    def subscription_count(self) -> int:
        """Number of live subscriptions across all keys."""
        return sum(len(subs) for subs in self._subscriptions.values())

    def get_value(self, key: str, default: Any = None) -> Any:
        """Return the value stored under *key*, or *default* when never set."""
        return self._values.get(key, default)

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)

    def update(self, key: str, value: Any) -> None:
        """Overwrite *key* and notify its current subscribers synchronously.

        A subscriber cancelled by an earlier callback in the same round is
        skipped. A raising callback is logged; the others still run.
        """
        self._values[key] = value
        subscriptions = self._subscriptions.get(key)
        if not subscriptions:
            return
        for subscription in list(subscriptions):
            if not subscription.active:
                continue
            try:
                subscription.callback(value)
            except Exception:
                _logger.exception("State listener for key=%s failed", key)

    def clear(self, key: str) -> None:
        """Write ``None`` under *key* (a normal write, subscribers are notified)."""
        self.update(key, None)

    def listen(self, key: str, callback: StateCallback) -> Subscription:
        subscription = Subscription(self, key, callback)
        self._subscriptions.setdefault(key, []).append(subscription)
        return subscription

    def close(self) -> None:
        """Cancel every subscription and drop all values."""
        for subscriptions in list(self._subscriptions.values()):
            for subscription in list(subscriptions):
                subscription.cancel()
        self._subscriptions.clear()
        self._values.clear()

    def _discard(self, subscription: Subscription) -> None:
        subscriptions = self._subscriptions.get(subscription.key)
        if subscriptions is None:
            return
        try:
            subscriptions.remove(subscription)
        except ValueError:
            return
        if not subscriptions:
            del self._subscriptions[subscription.key]
