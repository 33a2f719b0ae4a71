"""
Counter Aggregates.

Counters accumulate integer increments and are never reset by the engine.
A DeltaCounter behaves the same way in-process; its kind tells the
transport layer to report the change since the previous send instead of
the running total.
"""

from __future__ import annotations

from threading import Lock

from telemetry_reporter.domain.entities import MetricKind


class Counter:
    """Thread-safe cumulative counter."""

    kind = MetricKind.COUNTER

    def __init__(self) -> None:
        self._value = 0
        self._lock = Lock()

    def inc(self, amount: int = 1) -> None:
        """Add amount (default 1) to the counter."""
        with self._lock:
            self._value += amount

    @property
    def count(self) -> int:
        """Current accumulated value."""
        with self._lock:
            return self._value


class DeltaCounter(Counter):
    """Counter reported as a delta by the transport layer."""

    kind = MetricKind.DELTA_COUNTER
