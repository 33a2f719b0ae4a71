"""
Periodic Task - Fixed-Rate Background Timer.

Runs an action on a dedicated daemon thread at a fixed rate. Shared by the
flush schedulers and the heartbeater so that all three timers follow the
same lifecycle:

    CREATED --start()--> RUNNING --stop()--> STOPPED (terminal)

Design Notes:
    - First tick fires after the initial delay (one full interval by default)
    - Ticks that overrun the interval skip the missed fires instead of
      running them back to back
    - stop() is idempotent and waits, with a bound, for an in-flight tick;
      once the timer thread has exited no further tick can fire
    - Exceptions raised by the action are logged and the cadence continues
"""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Any, Callable, Optional

from telemetry_reporter.domain.entities import LifecycleState
from telemetry_reporter.resilience.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

DEFAULT_STOP_TIMEOUT_SECONDS = 10.0


class PeriodicTask:
    """Fixed-rate timer running one action on its own thread."""

    def __init__(
        self,
        name: str,
        action: Callable[[], None],
        interval_seconds: float,
        initial_delay_seconds: Optional[float] = None,
        stop_timeout_seconds: float = DEFAULT_STOP_TIMEOUT_SECONDS,
        observability: Optional[Any] = None,
    ) -> None:
        """
        Initialize periodic task.

        Args:
            name: Name used for the thread and in logs
            action: Zero-argument callable run on every tick
            interval_seconds: Time between ticks
            initial_delay_seconds: Delay before the first tick (default: interval)
            stop_timeout_seconds: Upper bound on waiting for an in-flight tick
            observability: ObservabilityManager for lifecycle events (optional)

        Raises:
            InvalidConfiguration: If the action is missing or timings are invalid
        """
        if action is None:
            raise InvalidConfiguration(f"{name}: action is required")
        if interval_seconds is None or interval_seconds <= 0:
            raise InvalidConfiguration(
                f"{name}: interval must be positive, got {interval_seconds}"
            )
        if initial_delay_seconds is not None and initial_delay_seconds < 0:
            raise InvalidConfiguration(
                f"{name}: initial delay must not be negative, got {initial_delay_seconds}"
            )

        self.name = name
        self.interval_seconds = float(interval_seconds)
        self.initial_delay_seconds = (
            self.interval_seconds if initial_delay_seconds is None else float(initial_delay_seconds)
        )
        self.stop_timeout_seconds = stop_timeout_seconds
        self.observability = observability
        self._action = action
        self._state = LifecycleState.CREATED
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._tick_count = 0

    @property
    def state(self) -> LifecycleState:
        with self._state_lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state == LifecycleState.RUNNING

    @property
    def tick_count(self) -> int:
        """Number of ticks executed by the timer thread."""
        return self._tick_count

    def start(self) -> bool:
        """
        Start the timer thread.

        Returns:
            True if the task transitioned to RUNNING, False if the call had
            no effect (already running or already stopped)
        """
        with self._state_lock:
            if self._state == LifecycleState.RUNNING:
                logger.debug(f"{self.name} already running")
                return False
            if self._state == LifecycleState.STOPPED:
                logger.warning(f"{self.name} was stopped and cannot be restarted")
                return False

            self._state = LifecycleState.RUNNING
            self._thread = threading.Thread(
                target=self._run,
                name=f"{self.name}-timer",
                daemon=True,
            )
            self._thread.start()

        logger.info(
            f"{self.name} started (interval={self.interval_seconds}s, "
            f"initial_delay={self.initial_delay_seconds}s)"
        )
        return True

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Cancel future ticks and wait for an in-flight tick to finish.

        Args:
            timeout: Wait bound in seconds (default: stop_timeout_seconds)

        Returns:
            True if this call performed the transition to STOPPED
        """
        with self._state_lock:
            if self._state == LifecycleState.STOPPED:
                return False
            self._state = LifecycleState.STOPPED
            self._stop_event.set()
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            wait = self.stop_timeout_seconds if timeout is None else timeout
            thread.join(wait)
            if thread.is_alive():
                logger.warning(
                    f"{self.name} did not finish its in-flight tick within {wait}s; "
                    f"releasing it anyway"
                )
                if self.observability is not None:
                    self.observability.log_event(
                        "stop_timeout",
                        {"task": self.name, "timeout_seconds": wait},
                        level="warning",
                    )

        logger.info(f"{self.name} stopped")
        return True

    def _run(self) -> None:
        next_fire = time.monotonic() + self.initial_delay_seconds
        while not self._stop_event.wait(max(0.0, next_fire - time.monotonic())):
            if self._stop_event.is_set():
                break
            self._execute()
            self._tick_count += 1

            next_fire += self.interval_seconds
            now = time.monotonic()
            if next_fire < now:
                missed = math.ceil((now - next_fire) / self.interval_seconds)
                logger.debug(f"{self.name} overran its interval, skipping {missed} fires")
                next_fire += missed * self.interval_seconds

    def _execute(self) -> None:
        try:
            self._action()
        except Exception as e:
            logger.error(f"{self.name} tick failed: {e}", exc_info=True)
