"""
In-Memory Transport.

A transport that keeps every batch it receives in memory. Used for
development, tests and local inspection of what would be sent.
"""

from __future__ import annotations

from threading import Lock
from typing import Dict, List, Optional, Sequence

from telemetry_reporter.domain.entities import MetricPoint
from telemetry_reporter.resilience.errors import TransportError


class InMemoryTransport:
    """Simple in-memory transport with optional failure injection."""

    def __init__(self) -> None:
        """Initialize the transport."""
        self._batches: List[List[MetricPoint]] = []
        self._lock = Lock()
        self._failures_remaining = 0
        self._always_fail = False
        self.send_attempts = 0

    def send(self, batch: Sequence[MetricPoint]) -> None:
        """Record a batch, or raise if a failure was injected."""
        with self._lock:
            self.send_attempts += 1
            if self._always_fail:
                raise TransportError("transport unavailable")
            if self._failures_remaining > 0:
                self._failures_remaining -= 1
                raise TransportError("transport unavailable")
            self._batches.append(list(batch))

    def fail_next(self, count: int = 1) -> None:
        """Make the next count sends raise TransportError."""
        with self._lock:
            self._failures_remaining = count

    def set_unavailable(self, unavailable: bool) -> None:
        """Make every send fail until switched back."""
        with self._lock:
            self._always_fail = unavailable

    def get_batches(self) -> List[List[MetricPoint]]:
        """All accepted batches, oldest first."""
        with self._lock:
            return [list(b) for b in self._batches]

    def get_points(self, name: Optional[str] = None) -> List[MetricPoint]:
        """All accepted points, optionally filtered by name."""
        with self._lock:
            points = [p for batch in self._batches for p in batch]
        if name is None:
            return points
        return [p for p in points if p.name == name]

    def latest_values(self) -> Dict[str, float]:
        """Last accepted value per point name."""
        return {p.name: p.value for p in self.get_points()}

    def clear(self) -> None:
        """Forget all accepted batches."""
        with self._lock:
            self._batches.clear()
