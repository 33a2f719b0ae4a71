"""
Delta Framing Transport.

Delta counters leave the registry with their cumulative value. This
wrapper turns them into "change since the last successful send" before
handing the batch to the real transport.

Design Notes:
    - The baseline per series only advances after the inner send succeeds,
      so a failed batch is re-counted in the next delta
    - Zero deltas are dropped from the batch
    - All other point kinds pass through untouched
"""

from __future__ import annotations

import logging
from dataclasses import replace
from threading import Lock
from typing import Dict, List, Optional, Sequence, Tuple

from telemetry_reporter.domain.entities import MetricKind, MetricPoint
from telemetry_reporter.interfaces.transport import Transport
from telemetry_reporter.resilience.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

SeriesKey = Tuple[str, Tuple[Tuple[str, str], ...], Optional[str]]


class DeltaFramingTransport:
    """Wraps a transport and reports delta counters as increments."""

    def __init__(self, inner: Transport) -> None:
        if inner is None:
            raise InvalidConfiguration("DeltaFramingTransport requires an inner transport")
        self._inner = inner
        self._reported: Dict[SeriesKey, float] = {}
        self._lock = Lock()

    def send(self, batch: Sequence[MetricPoint]) -> None:
        with self._lock:
            framed: List[MetricPoint] = []
            pending: Dict[SeriesKey, float] = {}
            for point in batch:
                if point.kind != MetricKind.DELTA_COUNTER:
                    framed.append(point)
                    continue
                key = self._series_key(point)
                delta = point.value - self._reported.get(key, 0.0)
                pending[key] = point.value
                if delta != 0:
                    framed.append(replace(point, value=delta))

            if framed:
                self._inner.send(framed)
            self._reported.update(pending)

    @staticmethod
    def _series_key(point: MetricPoint) -> SeriesKey:
        return (point.name, tuple(sorted(point.tags.items())), point.source)
