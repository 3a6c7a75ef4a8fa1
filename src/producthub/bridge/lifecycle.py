"""Scoped acquisition of bridge resources.

Anything a component registers on mount (store subscriptions, router
handlers, deep-link listeners) is represented by a :class:`Disposable`.
A :class:`Scope` collects them and releases all of them exactly once when
the component unmounts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol, runtime_checkable

_logger = logging.getLogger(__name__)


@runtime_checkable
class Disposable(Protocol):
    def cancel(self) -> None:
        ...


class Disposer:
    """Wrap a cleanup callable so that it runs at most once."""

    __slots__ = ("_callback",)

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback: Callable[[], None] | None = callback

    @property
    def active(self) -> bool:
        return self._callback is not None

    def cancel(self) -> None:
        callback = self._callback
        if callback is None:
            return
        self._callback = None
        callback()


class Scope:
    """Owner of disposables acquired during one component lifetime.

    Usage::

        scope = Scope("cart-screen")
        scope.add(store.listen("cartItemCount", on_count))
        scope.add(router.add_handler("rebuild_screen", on_rebuild, owner=scope))
        ...
        scope.dispose()

    Disposables are released in reverse acquisition order. ``dispose()`` is
    idempotent; anything added after disposal is released immediately.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._disposables: list[Disposable] = []
        self._disposed = False

    def __repr__(self) -> str:
        return f"Scope({self.name!r}, disposed={self._disposed})"

    def __enter__(self) -> Scope:
        return self

    def __exit__(self, *exc: object) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        return len(self._disposables)

    def add(self, disposable: Disposable) -> Disposable:
        if self._disposed:
            _logger.debug("%r already disposed; releasing late registration", self)
            disposable.cancel()
            return disposable
        self._disposables.append(disposable)
        return disposable

    def add_callback(self, callback: Callable[[], None]) -> Disposer:
        disposer = Disposer(callback)
        self.add(disposer)
        return disposer

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        disposables, self._disposables = self._disposables, []
        for disposable in reversed(disposables):
            try:
                disposable.cancel()
            except Exception:
                _logger.warning("Disposing %r in %r failed", disposable, self, exc_info=True)
