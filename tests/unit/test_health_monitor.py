"""
Unit Tests for HealthMonitor.

Test Aspects Covered:
    ✅ Business Logic: Running, failure and freshness checks
    ✅ Edge Cases: No flush yet, monitoring disabled
    ✅ Time Logic: Flush age against the reporting interval
"""

from __future__ import annotations

import pytest

from telemetry_reporter.config.models import HealthMonitorConfig
from telemetry_reporter.observability.health_monitor import HealthCheckResult, HealthMonitor
from telemetry_reporter.reporting.facade import DualReporterFacade


@pytest.fixture
def facade(transport, reporter_config, clock) -> DualReporterFacade:
    return DualReporterFacade(transport, reporter_config, clock=clock)


class TestHealthMonitor:
    """Test cases for HealthMonitor."""

    def test_not_running_fails(self, facade, clock) -> None:
        """
        SCENARIO: Facade never started
        EXPECTED: Unhealthy, reporter_running check fails
        """
        status = HealthMonitor(clock=clock).check(facade)

        assert not status.is_healthy
        assert status.get_check("reporter_running").result == HealthCheckResult.FAIL

    def test_healthy_running_reporter(self, facade, clock) -> None:
        facade.start()
        facade.increment_counter("requests")
        facade.primary.flush()

        status = HealthMonitor(clock=clock).check(facade)
        facade.stop()

        assert status.is_healthy
        assert status.get_check("flush_failures").result == HealthCheckResult.PASS
        assert status.get_check("flush_freshness").result == HealthCheckResult.PASS

    def test_consecutive_failures(self, facade, transport, clock, observability) -> None:
        """
        SCENARIO: Three failed flushes in a row
        EXPECTED: flush_failures fails and an anomaly is recorded
        """
        facade.increment_counter("requests")
        transport.set_unavailable(True)
        for _ in range(3):
            facade.primary.flush()

        monitor = HealthMonitor(
            HealthMonitorConfig(max_consecutive_failures=3),
            observability=observability,
            clock=clock,
        )
        status = monitor.check(facade)

        assert status.get_check("flush_failures").result == HealthCheckResult.FAIL
        assert status.get_check("flush_failures").value == 3.0
        assert any(e["check_name"] == "flush_failures" for e in observability.get_events("anomaly"))

    def test_stale_flush_warns(self, facade, clock) -> None:
        """
        SCENARIO: Last successful flush more than three intervals ago
        EXPECTED: flush_freshness warns
        """
        facade.increment_counter("requests")
        facade.primary.flush()
        clock.advance(60 * 3 + 1)

        status = HealthMonitor(clock=clock).check(facade)

        assert status.get_check("flush_freshness").result == HealthCheckResult.WARN

    def test_disabled(self, facade) -> None:
        status = HealthMonitor(HealthMonitorConfig(enabled=False)).check(facade)

        assert status.is_healthy
        assert status.checks == []
        assert status.summary["is_healthy"] is True
