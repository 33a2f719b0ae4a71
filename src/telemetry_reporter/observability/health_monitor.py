"""
Health Monitor - Reporter Health Checks.

Since flush failures never reach application code, this module turns the
flush statistics into an explicit health status:
    - Reporter running: the primary reporter is in RUNNING state
    - Flush failures: consecutive failed flushes below threshold
    - Flush freshness: last successful flush is recent enough

Design Notes:
    - Thresholds come from HealthMonitorConfig
    - Returns HealthStatus with pass/warn/fail per check
    - Logs anomalies via ObservabilityManager if provided
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from telemetry_reporter.config.models import HealthMonitorConfig
from telemetry_reporter.domain.entities import LifecycleState

if TYPE_CHECKING:
    from telemetry_reporter.reporting.facade import DualReporterFacade

logger = logging.getLogger(__name__)


class HealthCheckResult(Enum):
    """Result of a health check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class HealthCheck:
    """Individual health check result."""
    name: str
    result: HealthCheckResult
    message: str
    value: Optional[float] = None
    threshold: Optional[float] = None


@dataclass
class HealthStatus:
    """Overall health status."""
    is_healthy: bool
    checks: List[HealthCheck] = field(default_factory=list)
    timestamp: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now().isoformat()

    def add_check(self, check: HealthCheck) -> None:
        """Add a health check result."""
        self.checks.append(check)
        if check.result == HealthCheckResult.FAIL:
            self.is_healthy = False

    def get_check(self, name: str) -> Optional[HealthCheck]:
        """Look up a check by name."""
        for check in self.checks:
            if check.name == name:
                return check
        return None

    @property
    def summary(self) -> Dict[str, Any]:
        """Get summary of health status."""
        return {
            "is_healthy": self.is_healthy,
            "timestamp": self.timestamp,
            "checks": {
                c.name: {
                    "result": c.result.value,
                    "message": c.message,
                    "value": c.value,
                    "threshold": c.threshold,
                }
                for c in self.checks
            },
        }


class HealthMonitor:
    """Evaluates the health of a running reporter."""

    def __init__(
        self,
        config: Optional[HealthMonitorConfig] = None,
        observability: Optional[Any] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize health monitor.

        Args:
            config: Health monitoring thresholds
            observability: ObservabilityManager for logging (optional)
            clock: Wall-clock source in epoch seconds
        """
        self.config = config or HealthMonitorConfig()
        self.observability = observability
        self._clock = clock

    def check(self, facade: "DualReporterFacade") -> HealthStatus:
        """
        Check reporter health.

        Args:
            facade: Reporter to inspect

        Returns:
            HealthStatus with check results
        """
        status = HealthStatus(is_healthy=True)

        if not self.config.enabled:
            return status

        for check in (
            self._check_running(facade),
            self._check_failures(facade),
            self._check_freshness(facade),
        ):
            status.add_check(check)
            if check.result != HealthCheckResult.PASS:
                self._log_anomaly(check)

        return status

    def _check_running(self, facade: "DualReporterFacade") -> HealthCheck:
        state = facade.primary.state
        if state == LifecycleState.RUNNING:
            return HealthCheck(
                name="reporter_running",
                result=HealthCheckResult.PASS,
                message="Primary reporter running",
            )
        return HealthCheck(
            name="reporter_running",
            result=HealthCheckResult.FAIL,
            message=f"Primary reporter is {state.value}",
        )

    def _check_failures(self, facade: "DualReporterFacade") -> HealthCheck:
        failures = facade.stats.consecutive_failures
        threshold = self.config.max_consecutive_failures

        if failures >= threshold:
            result = HealthCheckResult.FAIL
            message = f"{failures} consecutive flush failures (max {threshold})"
        elif failures > 0:
            result = HealthCheckResult.WARN
            message = f"{failures} consecutive flush failures"
        else:
            result = HealthCheckResult.PASS
            message = "No recent flush failures"

        return HealthCheck(
            name="flush_failures",
            result=result,
            message=message,
            value=float(failures),
            threshold=float(threshold),
        )

    def _check_freshness(self, facade: "DualReporterFacade") -> HealthCheck:
        stats = facade.stats
        max_age = self.config.max_flush_age_intervals * facade.reporting_interval_seconds

        if stats.last_success_at is None:
            return HealthCheck(
                name="flush_freshness",
                result=HealthCheckResult.PASS,
                message="No successful flush yet",
                threshold=max_age,
            )

        age = self._clock() - stats.last_success_at
        if age > max_age:
            return HealthCheck(
                name="flush_freshness",
                result=HealthCheckResult.WARN,
                message=f"Last successful flush {age:.1f}s ago exceeds {max_age:.1f}s",
                value=age,
                threshold=max_age,
            )
        return HealthCheck(
            name="flush_freshness",
            result=HealthCheckResult.PASS,
            message=f"Last successful flush {age:.1f}s ago",
            value=age,
            threshold=max_age,
        )

    def _log_anomaly(self, check: HealthCheck) -> None:
        """Log health check anomaly."""
        severity = "ERROR" if check.result == HealthCheckResult.FAIL else "WARNING"

        if self.observability:
            self.observability.log_anomaly(
                check.message,
                severity,
                context={
                    "check_name": check.name,
                    "value": check.value,
                    "threshold": check.threshold,
                },
            )
        else:
            log_fn = logger.error if severity == "ERROR" else logger.warning
            log_fn(f"Health check {check.name}: {check.message}")
