"""
Reporter - One Registry, One Scheduler, One Naming Scope.

A Reporter qualifies metric names with its prefix, merges its reporter-level
tags into every identity and keeps the resulting aggregates in its own
registry. Its flush scheduler sends them to the shared transport.

Mutation operations never fail because of lifecycle state: before start()
they accumulate, after stop() they still accumulate but are never flushed.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

from telemetry_reporter.domain.entities import LifecycleState, MetricIdentity
from telemetry_reporter.interfaces.transport import Transport
from telemetry_reporter.metrics.gauge import Sampler
from telemetry_reporter.metrics.histogram import DEFAULT_WINDOW_SECONDS
from telemetry_reporter.registry.metric_registry import MetricRegistry
from telemetry_reporter.resilience.error_handler import ErrorHandler
from telemetry_reporter.resilience.errors import InvalidConfiguration, InvalidIdentity
from telemetry_reporter.scheduling.flush_scheduler import FlushScheduler, FlushStats
from telemetry_reporter.scheduling.periodic_task import DEFAULT_STOP_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class Reporter:
    """
    Prefix- and tag-scoped metrics reporter.

    Example:
        reporter = Reporter(transport, prefix="http.server",
                            reporter_tags={"application": "shop"})
        reporter.increment_counter("requests", {"path": "/orders"})
        reporter.start(interval_seconds=60)
        ...
        reporter.stop()
    """

    def __init__(
        self,
        transport: Transport,
        prefix: Optional[str] = None,
        reporter_tags: Optional[Mapping[str, str]] = None,
        source: Optional[str] = None,
        interval_seconds: float = 60,
        name: str = "reporter",
        histogram_window_seconds: float = DEFAULT_WINDOW_SECONDS,
        stop_timeout_seconds: float = DEFAULT_STOP_TIMEOUT_SECONDS,
        error_handler: Optional[ErrorHandler] = None,
        observability: Optional[Any] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize reporter.

        Args:
            transport: Transport receiving flushed batches
            prefix: Prepended to every metric name as "<prefix>.<name>"
            reporter_tags: Tags merged into every metric identity
            source: Source name stamped on flushed points
            interval_seconds: Flush interval used by start() by default
            name: Name used in logs and for the timer thread
            histogram_window_seconds: Window length for histograms
            stop_timeout_seconds: Upper bound on waiting for an in-flight flush
            error_handler: Handler guarding transport sends
            observability: ObservabilityManager for events (optional)
            clock: Wall-clock source in epoch seconds

        Raises:
            InvalidConfiguration: If transport is missing or settings are invalid
        """
        if transport is None:
            raise InvalidConfiguration(f"{name}: transport is required")
        if interval_seconds is None or interval_seconds <= 0:
            raise InvalidConfiguration(
                f"{name}: interval must be positive, got {interval_seconds}"
            )

        self.name = name
        self.prefix = prefix
        self.source = source
        self.interval_seconds = interval_seconds
        self.observability = observability
        self._reporter_tags: Dict[str, str] = dict(reporter_tags or {})
        self.registry = MetricRegistry(
            histogram_window_seconds=histogram_window_seconds,
            source=source,
            clock=clock,
        )
        self._scheduler = FlushScheduler(
            self.registry,
            transport,
            name=name,
            stop_timeout_seconds=stop_timeout_seconds,
            error_handler=error_handler,
            observability=observability,
            clock=clock,
        )

    @property
    def reporter_tags(self) -> Dict[str, str]:
        return dict(self._reporter_tags)

    @property
    def state(self) -> LifecycleState:
        return self._scheduler.state

    @property
    def is_running(self) -> bool:
        return self.state == LifecycleState.RUNNING

    @property
    def stats(self) -> FlushStats:
        return self._scheduler.stats

    # =========================================================================
    # Mutation operations
    # =========================================================================

    def increment_counter(
        self,
        name: str,
        tags: Optional[Mapping[str, str]] = None,
        amount: int = 1,
    ) -> None:
        """Increment the counter name by amount."""
        self.registry.get_or_create_counter(self.identity(name, tags)).inc(amount)

    def increment_delta_counter(
        self,
        name: str,
        tags: Optional[Mapping[str, str]] = None,
        amount: int = 1,
    ) -> None:
        """Increment the delta counter name by amount."""
        self.registry.get_or_create_delta_counter(self.identity(name, tags)).inc(amount)

    def register_gauge(
        self,
        name: str,
        accessor: Any,
        tags: Optional[Mapping[str, str]] = None,
    ) -> None:
        """Register a gauge; the first accessor registered for name is kept."""
        self.registry.get_or_create_gauge(self.identity(name, tags), Sampler.of(accessor))

    def update_histogram(
        self,
        name: str,
        value: float,
        tags: Optional[Mapping[str, str]] = None,
        timestamp: Optional[float] = None,
    ) -> None:
        """Add one observation to the histogram name."""
        self.registry.update_histogram(self.identity(name, tags), value, timestamp)

    def identity(
        self,
        name: str,
        tags: Optional[Mapping[str, str]] = None,
    ) -> MetricIdentity:
        """
        Qualify name with the prefix and merge in reporter tags.

        Metric tags win over reporter tags with the same key.

        Raises:
            InvalidIdentity: If name or tags are malformed
        """
        if not isinstance(name, str) or not name.strip():
            raise InvalidIdentity(f"Metric name must be a non-empty string, got {name!r}")
        if tags is not None and not isinstance(tags, Mapping):
            raise InvalidIdentity(f"Tags must be a mapping, got {type(tags).__name__}")

        qualified = f"{self.prefix}.{name}" if self.prefix else name
        merged = dict(self._reporter_tags)
        if tags:
            merged.update(tags)
        return MetricIdentity.of(qualified, merged)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self, interval_seconds: Optional[float] = None) -> bool:
        """
        Start periodic flushing.

        Args:
            interval_seconds: Flush interval (default: the configured interval)

        Returns:
            True if the reporter started with this call
        """
        interval = self.interval_seconds if interval_seconds is None else interval_seconds
        started = self._scheduler.start(interval)
        if started and self.observability is not None:
            self.observability.log_event(
                "reporter_started",
                {"reporter": self.name, "interval_seconds": interval},
            )
        return started

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Stop periodic flushing, waiting for an in-flight flush.

        Returns:
            True if this call stopped the reporter
        """
        stopped = self._scheduler.stop(timeout)
        if stopped and self.observability is not None:
            self.observability.log_event("reporter_stopped", {"reporter": self.name})
        return stopped

    def flush(self) -> int:
        """Flush immediately; returns the number of points sent (0 once stopped)."""
        return self._scheduler.flush_now()
