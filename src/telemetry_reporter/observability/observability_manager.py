"""
Observability Manager - Structured Events for the Reporter Itself.

Provides:
    - Structured logging via structlog
    - An in-memory list of recorded events (lifecycle changes, failed
      flushes and heartbeats, stop timeouts) for inspection and health checks

Design Notes:
    - Thread-safe event storage; events come from timer threads
    - This is the side-channel through which background failures are
      reported, since they never reach mutation callers
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

DEFAULT_MAX_EVENTS = 1000


class ObservabilityManager:
    """
    Structured event log for reporter lifecycle and failures.

    Events are logged through structlog and kept in a bounded in-memory list.
    """

    def __init__(
        self,
        service_name: str = "telemetry_reporter",
        use_json: bool = True,
        log_level: int = logging.INFO,
        configure: bool = True,
        max_events: int = DEFAULT_MAX_EVENTS,
    ) -> None:
        """
        Initialize observability manager.

        Args:
            service_name: Service name bound to every log entry
            use_json: Use JSON output instead of the console renderer
            log_level: Minimum level passed through by structlog
            configure: Apply structlog configuration (process-wide)
            max_events: Number of events kept in memory
        """
        self.service_name = service_name
        self.use_json = use_json
        self.log_level = log_level
        self.max_events = max_events
        self._events: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

        if configure:
            self._configure_structlog()
        self._logger = structlog.get_logger(service_name).bind(service=service_name)

    def _configure_structlog(self) -> None:
        """Configure structlog for structured logging."""
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]

        if self.use_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(self.log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(),
            cache_logger_on_first_use=True,
        )

    def log_event(
        self,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
        level: str = "info",
    ) -> None:
        """
        Log a structured event.

        Args:
            event_type: Type of event (e.g., "reporter_started", "flush_failed")
            data: Additional event data
            level: Log level (debug, info, warning, error)
        """
        event_data = {
            "event_type": event_type,
            "timestamp": datetime.now().isoformat(),
            **(data or {}),
        }

        with self._lock:
            self._events.append(event_data)
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

        log_method = getattr(self._logger, level.lower(), self._logger.info)
        log_method(event_type, **{k: v for k, v in event_data.items() if k != "event_type"})

    def log_anomaly(
        self,
        message: str,
        severity: str,
        context: Optional[Dict] = None,
    ) -> None:
        """Log an anomaly found by a health check."""
        level = "warning" if severity.upper() == "WARNING" else "error"
        self.log_event(
            "anomaly",
            {
                "message": message,
                "severity": severity,
                **(context or {}),
            },
            level=level,
        )

    def get_events(self, event_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get recorded events, optionally filtered by type."""
        with self._lock:
            events = list(self._events)
        if event_type is None:
            return events
        return [e for e in events if e["event_type"] == event_type]

    def clear(self) -> None:
        """Clear all recorded events."""
        with self._lock:
            self._events.clear()
