"""
Heartbeater Service - Periodic Liveness Announcements.

Every tick sends one batch containing a "~component.heartbeat" point per
configured component kind, tagged with the application identity and the
resolved source. Heartbeats go out whether or not the reporters have
anything to flush.

Design Notes:
    - The timer starts on an explicit start() call, not at construction
    - close() is idempotent; once it returns no further heartbeat fires
    - Send failures are logged and recorded, never raised
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, List, Optional, Sequence

from telemetry_reporter.domain.entities import (
    ApplicationTags,
    LifecycleState,
    MetricKind,
    MetricPoint,
)
from telemetry_reporter.interfaces.transport import Transport
from telemetry_reporter.resilience.error_handler import ErrorHandler
from telemetry_reporter.resilience.errors import InvalidConfiguration
from telemetry_reporter.scheduling.periodic_task import (
    DEFAULT_STOP_TIMEOUT_SECONDS,
    PeriodicTask,
)

logger = logging.getLogger(__name__)

HEARTBEAT_METRIC = "~component.heartbeat"
DEFAULT_HEARTBEAT_INTERVAL_SECONDS = 300.0
DEFAULT_INITIAL_DELAY_SECONDS = 1.0


class HeartbeaterService:
    """Announces that the instrumented components are alive."""

    def __init__(
        self,
        transport: Transport,
        application_tags: ApplicationTags,
        components: Sequence[str],
        source: str,
        interval_seconds: float = DEFAULT_HEARTBEAT_INTERVAL_SECONDS,
        initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS,
        stop_timeout_seconds: float = DEFAULT_STOP_TIMEOUT_SECONDS,
        error_handler: Optional[ErrorHandler] = None,
        observability: Optional[Any] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize heartbeater.

        Args:
            transport: Transport receiving heartbeat batches
            application_tags: Identity of the instrumented application
            components: Component kinds announced on every tick
            source: Resolved source name
            interval_seconds: Time between heartbeats
            initial_delay_seconds: Delay between start() and the first heartbeat
            stop_timeout_seconds: Upper bound on waiting for an in-flight tick
            error_handler: Handler guarding transport sends
            observability: ObservabilityManager for events (optional)
            clock: Wall-clock source for point timestamps

        Raises:
            InvalidConfiguration: If a required collaborator is missing
        """
        if transport is None:
            raise InvalidConfiguration("HeartbeaterService: transport is required")
        if application_tags is None:
            raise InvalidConfiguration("HeartbeaterService: application tags are required")
        if not components:
            raise InvalidConfiguration("HeartbeaterService: at least one component is required")
        if not source:
            raise InvalidConfiguration("HeartbeaterService: source is required")

        self.application_tags = application_tags
        self.components: List[str] = list(components)
        self.source = source
        self.observability = observability
        self._transport = transport
        self._error_handler = error_handler or ErrorHandler(observability)
        self._clock = clock
        self._lock = threading.Lock()
        self._beats_sent = 0
        self._failures = 0
        self._task = PeriodicTask(
            name="heartbeater",
            action=self.beat,
            interval_seconds=interval_seconds,
            initial_delay_seconds=initial_delay_seconds,
            stop_timeout_seconds=stop_timeout_seconds,
            observability=observability,
        )

    @property
    def state(self) -> LifecycleState:
        return self._task.state

    @property
    def beats_sent(self) -> int:
        with self._lock:
            return self._beats_sent

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def start(self) -> bool:
        """Start the heartbeat timer; returns True if it started."""
        return self._task.start()

    def close(self, timeout: Optional[float] = None) -> bool:
        """
        Stop the heartbeat timer.

        Returns:
            True if this call closed the service, False if already closed
        """
        return self._task.stop(timeout)

    def build_points(self) -> List[MetricPoint]:
        """Heartbeat points for one tick, one per component."""
        base_tags = self.application_tags.to_heartbeat_tags()
        timestamp = self._clock()
        return [
            MetricPoint(
                name=HEARTBEAT_METRIC,
                value=1.0,
                kind=MetricKind.GAUGE,
                tags={**base_tags, "component": component},
                timestamp=timestamp,
                source=self.source,
            )
            for component in self.components
        ]

    def beat(self) -> bool:
        """
        Send one heartbeat batch.

        Returns:
            True if the transport accepted it, False on failure or once closed
        """
        if self._task.state == LifecycleState.STOPPED:
            logger.debug("Heartbeater closed, skipping beat")
            return False

        points = self.build_points()
        error = self._error_handler.send(
            self._transport.send, points, operation_name="heartbeat"
        )
        with self._lock:
            if error is None:
                self._beats_sent += 1
            else:
                self._failures += 1

        if error is not None and self.observability is not None:
            self.observability.log_event(
                "heartbeat_failed",
                {"source": self.source, "error": str(error)},
                level="warning",
            )
        return error is None

    def __enter__(self) -> "HeartbeaterService":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
