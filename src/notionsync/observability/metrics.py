"""Metrics hook protocol and no-op default implementation.

notionsync emits counters and timings at the points where it talks to
Notion.  By default a :class:`NoopMetricsHook` discards everything; pass an
object satisfying :class:`MetricsHook` as ``SyncConfig.metrics`` to route
the data points to StatsD, Prometheus or similar.

Emitted metric names:

* ``notionsync.requests_total``          -- counter
* ``notionsync.retries_total``           -- counter
* ``notionsync.rate_limited_total``      -- counter
* ``notionsync.request_duration_ms``     -- timing
* ``notionsync.rate_limit_wait_ms``      -- timing
* ``notionsync.blocks_deleted_total``    -- counter
* ``notionsync.blocks_appended_total``   -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* are string key/value pairs; backends translate them into their
    own labelling scheme.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that silently discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
