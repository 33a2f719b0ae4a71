"""
Flush Scheduler - Periodic Drain and Send.

Every interval the scheduler drains its registry and hands the resulting
batch to the transport. Delivery is at-most-once: a batch the transport
rejects is logged, counted and dropped, and the next flush happens on the
regular cadence.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from telemetry_reporter.domain.entities import LifecycleState
from telemetry_reporter.interfaces.transport import Transport
from telemetry_reporter.registry.metric_registry import MetricRegistryProtocol
from telemetry_reporter.resilience.error_handler import ErrorHandler
from telemetry_reporter.resilience.errors import InvalidConfiguration
from telemetry_reporter.scheduling.periodic_task import (
    DEFAULT_STOP_TIMEOUT_SECONDS,
    PeriodicTask,
)

logger = logging.getLogger(__name__)


@dataclass
class FlushStats:
    """Flush statistics for one scheduler."""

    flushes: int = 0
    failures: int = 0
    consecutive_failures: int = 0
    points_sent: int = 0
    points_dropped: int = 0
    last_success_at: Optional[float] = None
    last_failure_at: Optional[float] = None

    @property
    def failure_rate(self) -> float:
        """Share of flushes that failed."""
        return self.failures / self.flushes if self.flushes > 0 else 0.0


class FlushScheduler:
    """
    Drains one registry into one transport at a fixed rate.

    Features:
        - First flush after one full interval, then fixed rate
        - Graceful, bounded stop that waits for an in-flight flush
        - Manual flush_now() serialized with timer flushes
        - FlushStats for health checks
    """

    def __init__(
        self,
        registry: MetricRegistryProtocol,
        transport: Transport,
        name: str = "flush",
        stop_timeout_seconds: float = DEFAULT_STOP_TIMEOUT_SECONDS,
        error_handler: Optional[ErrorHandler] = None,
        observability: Optional[Any] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize flush scheduler.

        Args:
            registry: Registry to drain
            transport: Transport receiving the batches
            name: Name used in logs and for the timer thread
            stop_timeout_seconds: Upper bound on waiting for an in-flight flush
            error_handler: Handler guarding transport sends
            observability: ObservabilityManager for events (optional)
            clock: Wall-clock source used for stats timestamps

        Raises:
            InvalidConfiguration: If registry or transport is missing
        """
        if registry is None:
            raise InvalidConfiguration(f"{name}: registry is required")
        if transport is None:
            raise InvalidConfiguration(f"{name}: transport is required")

        self.name = name
        self.stop_timeout_seconds = stop_timeout_seconds
        self.observability = observability
        self._registry = registry
        self._transport = transport
        self._error_handler = error_handler or ErrorHandler(observability)
        self._clock = clock
        self._task: Optional[PeriodicTask] = None
        self._stopped = False
        self._lock = threading.Lock()
        self._flush_lock = threading.Lock()
        self._stats = FlushStats()

    @property
    def state(self) -> LifecycleState:
        with self._lock:
            if self._stopped:
                return LifecycleState.STOPPED
            if self._task is None:
                return LifecycleState.CREATED
            return self._task.state

    @property
    def stats(self) -> FlushStats:
        """Copy of the current flush statistics."""
        with self._lock:
            return replace(self._stats)

    def start(self, interval_seconds: float) -> bool:
        """
        Begin flushing every interval_seconds.

        Returns:
            True if the scheduler started, False if it was already running
            or has been stopped
        """
        with self._lock:
            if self._stopped:
                logger.warning(f"{self.name} was stopped and cannot be restarted")
                return False
            if self._task is not None:
                logger.debug(f"{self.name} already started")
                return False
            self._task = PeriodicTask(
                name=self.name,
                action=self._flush,
                interval_seconds=interval_seconds,
                stop_timeout_seconds=self.stop_timeout_seconds,
                observability=self.observability,
            )
            task = self._task
        return task.start()

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Cancel future flushes and wait for an in-flight one to complete.

        Returns:
            True if this call stopped the scheduler, False if already stopped
        """
        with self._lock:
            if self._stopped:
                return False
            self._stopped = True
            task = self._task

        if task is not None:
            task.stop(timeout)
        return True

    def flush_now(self) -> int:
        """
        Drain and send immediately on the calling thread.

        Returns:
            Number of points sent (0 when empty, stopped, or when the send
            failed)
        """
        return self._flush()

    def _flush(self) -> int:
        with self._flush_lock:
            with self._lock:
                if self._stopped:
                    return 0
            points = self._registry.drain_for_flush()
            if not points:
                return 0

            error = self._error_handler.send(
                self._transport.send, points, operation_name=f"{self.name} flush"
            )
            now = self._clock()

            with self._lock:
                self._stats.flushes += 1
                if error is None:
                    self._stats.points_sent += len(points)
                    self._stats.consecutive_failures = 0
                    self._stats.last_success_at = now
                else:
                    self._stats.failures += 1
                    self._stats.consecutive_failures += 1
                    self._stats.points_dropped += len(points)
                    self._stats.last_failure_at = now

            if error is not None:
                if self.observability is not None:
                    self.observability.log_event(
                        "flush_failed",
                        {"scheduler": self.name, "points": len(points), "error": str(error)},
                        level="warning",
                    )
                return 0

            logger.debug(f"{self.name} flushed {len(points)} points")
            return len(points)
