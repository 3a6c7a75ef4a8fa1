"""Dummy analytics adapter.

Stands in for a real analytics SDK (Firebase, Mixpanel, Amplitude...).
Every call is logged and kept in :attr:`AnalyticsAdapter.events` so the
demo and the tests can inspect what would have been sent.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from producthub._redact import redact_for_log

_logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class AnalyticsEvent:
    name: str
    params: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class AnalyticsAdapter:
    """In-memory analytics sink.

    Parameters
    ----------
    enabled : bool
        When ``False`` events are dropped (feature flag off).
    max_events : int
        Oldest events are discarded beyond this many.
    """

    def __init__(self, *, enabled: bool = True, max_events: int = 1000) -> None:
        self.enabled = enabled
        self._max_events = max_events
        self.events: list[AnalyticsEvent] = []
        self.user_id: str | None = None
        self.user_properties: dict[str, Any] = {}
        self.screens: list[str] = []

    def _record(self, name: str, params: Mapping[str, Any] | None) -> None:
        if not self.enabled:
            return
        self.events.append(AnalyticsEvent(name=name, params=dict(params or {})))
        overflow = len(self.events) - self._max_events
        if overflow > 0:
            del self.events[:overflow]

    def log_event(self, name: str, params: Mapping[str, Any] | None = None) -> None:
        _logger.info("Analytics event %s params=%s", name, redact_for_log(dict(params or {})))
        self._record(name, params)

    def set_user_properties(self, properties: Mapping[str, Any]) -> None:
        _logger.debug("Analytics user properties: %s", redact_for_log(dict(properties)))
        self.user_properties.update(properties)

    def set_user_id(self, user_id: str | None) -> None:
        _logger.debug("Analytics user id: %s", user_id)
        self.user_id = user_id

    def log_screen_view(self, screen_name: str) -> None:
        _logger.debug("Analytics screen view: %s", screen_name)
        self.screens.append(screen_name)
        self._record("screen_view", {"screen_name": screen_name})

    # ------------------------------------------------------------------
    # Hooks called by the dynamic UI layer
    # ------------------------------------------------------------------

    def on_data_source_error(self, data_source_type: str, source: str, error_info: Mapping[str, Any]) -> None:
        _logger.warning("Data source error %s:%s - %s", data_source_type, source, redact_for_log(dict(error_info)))
        self._record(
            "data_source_error",
            {"data_source_type": data_source_type, "source": source, **dict(error_info)},
        )

    def on_data_source_success(
        self,
        data_source_type: str,
        source: str,
        metadata: Mapping[str, Any] | None = None,
        perf: Mapping[str, Any] | None = None,
    ) -> None:
        _logger.debug("Data source success %s:%s perf=%s", data_source_type, source, dict(perf or {}))

    def on_event(self, events: Iterable[Mapping[str, Any]]) -> None:
        """Record a batch of page events (``{"name": ..., "payload": {...}}``)."""
        for event in events:
            name = str(event.get("name") or "custom_event")
            payload = event.get("payload")
            self.log_event(name, payload if isinstance(payload, Mapping) else None)

    def names(self) -> list[str]:
        return [event.name for event in self.events]
