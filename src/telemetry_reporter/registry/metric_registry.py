"""
Metric Registry - Identity to Aggregate Store.

Maps each MetricIdentity to exactly one mutable aggregate (counter, delta
counter, gauge or histogram) and turns the current state into MetricPoints
when a flush scheduler drains it.

Usage:
    registry = MetricRegistry()
    registry.get_or_create_counter(MetricIdentity.of("requests")).inc()
    registry.update_histogram(MetricIdentity.of("latency"), 12.0)

    points = registry.drain_for_flush()

Design Notes:
    - The registry lock guards only the identity map, and only while an
      aggregate is created; every aggregate carries its own lock
    - Metric kind is not part of the key: reusing an identity for another
      kind raises IdentityConflict
    - Counters and gauges are read on drain, histogram windows are cleared
"""

from __future__ import annotations

import logging
import time
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Protocol

from telemetry_reporter.domain.entities import MetricIdentity, MetricKind, MetricPoint
from telemetry_reporter.metrics.counter import Counter, DeltaCounter
from telemetry_reporter.metrics.gauge import Gauge, Sampler
from telemetry_reporter.metrics.histogram import DEFAULT_WINDOW_SECONDS, WindowedHistogram
from telemetry_reporter.resilience.errors import IdentityConflict, InvalidIdentity

logger = logging.getLogger(__name__)


class MetricRegistryProtocol(Protocol):
    """Protocol for metric registry implementations."""

    def get_or_create_counter(self, identity: MetricIdentity) -> Counter:
        ...

    def get_or_create_delta_counter(self, identity: MetricIdentity) -> DeltaCounter:
        ...

    def get_or_create_gauge(self, identity: MetricIdentity, sampler: Sampler) -> None:
        ...

    def update_histogram(
        self, identity: MetricIdentity, value: float, timestamp: Optional[float] = None
    ) -> None:
        ...

    def drain_for_flush(self, now: Optional[float] = None) -> List[MetricPoint]:
        ...


class MetricRegistry:
    """
    Thread-safe store of metric aggregates keyed by identity.

    Supports:
        - Idempotent get-or-create for counters and delta counters
        - First-registration-wins gauges
        - Lazily created windowed histograms
        - Concurrent drain while callers keep mutating
    """

    def __init__(
        self,
        histogram_window_seconds: float = DEFAULT_WINDOW_SECONDS,
        source: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize empty registry.

        Args:
            histogram_window_seconds: Window length for histograms
            source: Source name stamped on drained points
            clock: Wall-clock source in epoch seconds
        """
        self._metrics: Dict[MetricIdentity, Any] = {}
        self._lock = RLock()
        self._histogram_window_seconds = histogram_window_seconds
        self._source = source
        self._clock = clock

    def get_or_create_counter(self, identity: MetricIdentity) -> Counter:
        """
        Return the counter for identity, creating a zero-valued one if needed.

        Raises:
            InvalidIdentity: If identity is not a MetricIdentity
            IdentityConflict: If identity holds another metric kind
        """
        return self._get_or_create(identity, MetricKind.COUNTER, Counter)

    def get_or_create_delta_counter(self, identity: MetricIdentity) -> DeltaCounter:
        """Return the delta counter for identity, creating it if needed."""
        return self._get_or_create(identity, MetricKind.DELTA_COUNTER, DeltaCounter)

    def get_or_create_gauge(self, identity: MetricIdentity, sampler: Sampler) -> None:
        """
        Register a gauge sampler for identity.

        Registering an identity that already holds a gauge is silently
        ignored; the first sampler stays in place.
        """
        sampler = Sampler.of(sampler)
        self._get_or_create(identity, MetricKind.GAUGE, lambda: Gauge(sampler))

    def update_histogram(
        self,
        identity: MetricIdentity,
        value: float,
        timestamp: Optional[float] = None,
    ) -> None:
        """Add one observation to the histogram for identity."""
        histogram = self._get_or_create(
            identity,
            MetricKind.HISTOGRAM,
            lambda: WindowedHistogram(self._histogram_window_seconds, clock=self._clock),
        )
        histogram.update(value, timestamp)

    def get(self, identity: MetricIdentity) -> Optional[Any]:
        """Get the aggregate registered for identity, if any."""
        return self._metrics.get(identity)

    def identities(self) -> List[MetricIdentity]:
        """All registered identities."""
        with self._lock:
            return list(self._metrics)

    def clear(self) -> None:
        """Remove all aggregates."""
        with self._lock:
            self._metrics.clear()
            logger.debug("Cleared metric registry")

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)

    def drain_for_flush(self, now: Optional[float] = None) -> List[MetricPoint]:
        """
        Snapshot the registry into metric points.

        Counter and gauge state is read and left in place. Completed histogram
        windows are read and cleared. Gauges whose sampler fails are skipped
        for this flush.

        Args:
            now: Reference time in epoch seconds (defaults to clock)

        Returns:
            List of points, one per counter/gauge and one per completed
            histogram window
        """
        reference = self._clock() if now is None else now
        with self._lock:
            entries = list(self._metrics.items())

        points: List[MetricPoint] = []
        for identity, metric in entries:
            tags = identity.tag_dict
            if metric.kind in (MetricKind.COUNTER, MetricKind.DELTA_COUNTER):
                points.append(self._point(identity.name, float(metric.count), metric.kind, tags, reference))
            elif metric.kind == MetricKind.GAUGE:
                try:
                    value = metric.value()
                except Exception as e:
                    logger.warning(f"Skipping gauge {identity}: sampler failed: {e}")
                    continue
                points.append(self._point(identity.name, value, metric.kind, tags, reference))
            elif metric.kind == MetricKind.HISTOGRAM:
                for snapshot in metric.drain_completed(reference):
                    points.append(
                        MetricPoint(
                            name=identity.name,
                            value=float(snapshot.count),
                            kind=metric.kind,
                            tags=dict(tags),
                            timestamp=snapshot.window_start,
                            source=self._source,
                            distribution=snapshot,
                        )
                    )
        return points

    def _point(
        self,
        name: str,
        value: float,
        kind: MetricKind,
        tags: Dict[str, str],
        timestamp: float,
    ) -> MetricPoint:
        return MetricPoint(
            name=name,
            value=value,
            kind=kind,
            tags=tags,
            timestamp=timestamp,
            source=self._source,
        )

    def _get_or_create(
        self,
        identity: MetricIdentity,
        kind: MetricKind,
        factory: Callable[[], Any],
    ) -> Any:
        if not isinstance(identity, MetricIdentity):
            raise InvalidIdentity(f"Expected MetricIdentity, got {type(identity).__name__}")

        metric = self._metrics.get(identity)
        if metric is None:
            with self._lock:
                metric = self._metrics.get(identity)
                if metric is None:
                    metric = factory()
                    self._metrics[identity] = metric
                    logger.debug(f"Registered {kind.value}: {identity}")
                    return metric

        if metric.kind != kind:
            raise IdentityConflict(identity, metric.kind.value, kind.value)
        return metric
