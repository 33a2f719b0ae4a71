"""
Windowed Histogram.

Observations are grouped into fixed, wall-clock aligned windows
(one minute by default). Draining hands back every window whose time range
has fully elapsed and forgets it; the window that contains "now" stays in
place and keeps collecting until a later drain.

Design Notes:
    - Windows are keyed by their aligned start time in epoch seconds
    - Raw values are kept per window; compression is left to the transport
    - Late observations for an already drained window open a fresh window
      with the same start and are emitted by the next drain
"""

from __future__ import annotations

import math
import time
from threading import Lock
from typing import Callable, Dict, List, Optional

from telemetry_reporter.domain.entities import HistogramSnapshot, MetricKind

DEFAULT_WINDOW_SECONDS = 60


class WindowedHistogram:
    """Thread-safe histogram that accumulates values per time window."""

    kind = MetricKind.HISTOGRAM

    def __init__(
        self,
        window_seconds: float = DEFAULT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize histogram.

        Args:
            window_seconds: Length of one window in seconds
            clock: Wall-clock source in epoch seconds
        """
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {window_seconds}")
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[float, List[float]] = {}
        self._lock = Lock()

    def update(self, value: float, timestamp: Optional[float] = None) -> None:
        """Record one observation, at timestamp or now."""
        ts = self._clock() if timestamp is None else timestamp
        start = self._window_start(ts)
        with self._lock:
            self._windows.setdefault(start, []).append(float(value))

    def drain_completed(self, now: Optional[float] = None) -> List[HistogramSnapshot]:
        """
        Remove and return all windows that ended at or before now.

        Args:
            now: Reference time in epoch seconds (defaults to clock)

        Returns:
            Snapshots ordered by window start
        """
        reference = self._clock() if now is None else now
        with self._lock:
            completed = sorted(
                start
                for start in self._windows
                if start + self.window_seconds <= reference
            )
            drained = [(start, self._windows.pop(start)) for start in completed]

        return [
            HistogramSnapshot(
                window_start=start,
                window_seconds=self.window_seconds,
                values=tuple(values),
            )
            for start, values in drained
        ]

    def pending_count(self) -> int:
        """Number of observations not yet drained."""
        with self._lock:
            return sum(len(v) for v in self._windows.values())

    def _window_start(self, ts: float) -> float:
        return math.floor(ts / self.window_seconds) * self.window_seconds
