"""
Error Handler - Failure Isolation for Timers and Shutdown.

Provides:
    - Guarded transport sends: any failure becomes a logged TransportError,
      never an exception on the timer thread
    - Best-effort "run all" for shutdown sequences

Design Notes:
    - Failed batches are dropped, not retried or re-queued
    - Shutdown keeps going after a failed step and reports every failure
    - Failed shutdown steps are also recorded on the ObservabilityManager
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

from telemetry_reporter.resilience.errors import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PartialResult(Generic[T]):
    """Result of running several independent steps."""
    successful: List[T] = field(default_factory=list)
    failed: List[Tuple[str, Exception]] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Calculate success rate (0.0 to 1.0)."""
        total = len(self.successful) + len(self.failed)
        if total == 0:
            return 1.0
        return len(self.successful) / total

    @property
    def has_failures(self) -> bool:
        """Check if any failures occurred."""
        return len(self.failed) > 0

    @property
    def first_error(self) -> Optional[Exception]:
        """First failure in execution order, if any."""
        return self.failed[0][1] if self.failed else None


class ErrorHandler:
    """
    Isolates failures of background work from the rest of the process.

    Features:
        - send(): wraps transport sends for flush and heartbeat timers
        - run_all(): best-effort execution of named shutdown steps
    """

    def __init__(self, observability: Optional[Any] = None) -> None:
        """
        Initialize error handler.

        Args:
            observability: ObservabilityManager for event recording (optional)
        """
        self.observability = observability

    def send(
        self,
        send_fn: Callable[[Sequence[Any]], Any],
        batch: Sequence[Any],
        operation_name: str = "send",
    ) -> Optional[TransportError]:
        """
        Send a batch, converting any failure to a logged TransportError.

        Args:
            send_fn: Transport send callable
            batch: Points to send
            operation_name: Name for logging

        Returns:
            None on success, the TransportError on failure
        """
        try:
            send_fn(batch)
            return None
        except Exception as e:
            error = e if isinstance(e, TransportError) else TransportError(str(e))
            if error is not e:
                error.__cause__ = e
            logger.warning(
                f"{operation_name} failed, dropping {len(batch)} points: {e}"
            )
            return error

    def run_all(
        self,
        steps: Sequence[Tuple[str, Callable[[], T]]],
        operation_name: str = "shutdown",
    ) -> PartialResult[T]:
        """
        Run every step even if earlier ones raise.

        Args:
            steps: (name, callable) pairs, executed in order
            operation_name: Name for logging

        Returns:
            PartialResult with step results and (name, error) failures
        """
        result: PartialResult[T] = PartialResult()

        for name, step in steps:
            try:
                result.successful.append(step())
            except Exception as e:
                result.failed.append((name, e))
                logger.error(f"{operation_name} step '{name}' failed: {e}")
                self._record(
                    "step_failed",
                    {"operation": operation_name, "step": name, "error": str(e)},
                )

        if result.has_failures:
            logger.warning(
                f"{operation_name} completed with {len(result.failed)} failures "
                f"({result.success_rate:.1%} success rate)"
            )

        return result

    def _record(self, event_type: str, data: dict) -> None:
        if self.observability is not None:
            self.observability.log_event(event_type, data, level="warning")
