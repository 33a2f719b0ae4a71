"""
Unit Tests for HeartbeaterService.

Test Aspects Covered:
    ✅ Business Logic: One point per component with application tags
    ✅ Error Handling: Send failures counted, never raised
    ✅ Idempotency: close() twice
    ✅ Time Logic: Initial delay, no beats after close
"""

from __future__ import annotations

import time

import pytest

from telemetry_reporter.domain.entities import LifecycleState, MetricKind
from telemetry_reporter.reporting.heartbeater import HEARTBEAT_METRIC, HeartbeaterService
from telemetry_reporter.resilience.errors import InvalidConfiguration


def make_heartbeater(transport, app_tags, **kwargs) -> HeartbeaterService:
    return HeartbeaterService(transport, app_tags, ["http-server"], "test-host", **kwargs)


class TestBeat:
    """Test cases for a single heartbeat."""

    def test_point_contents(self, transport, app_tags, clock) -> None:
        """
        SCENARIO: One beat for the http-server component
        EXPECTED: Gauge point named ~component.heartbeat with full tags
        """
        heartbeater = make_heartbeater(transport, app_tags, clock=clock)

        assert heartbeater.beat() is True

        [point] = transport.get_points()
        assert point.name == HEARTBEAT_METRIC
        assert point.kind == MetricKind.GAUGE
        assert point.value == 1.0
        assert point.source == "test-host"
        assert point.timestamp == clock.now
        assert point.tags == {
            "application": "shop",
            "service": "orders",
            "cluster": "none",
            "shard": "none",
            "component": "http-server",
        }

    def test_one_point_per_component(self, transport, app_tags) -> None:
        heartbeater = HeartbeaterService(transport, app_tags, ["http-server", "worker"], "h")

        points = heartbeater.build_points()

        assert [p.tags["component"] for p in points] == ["http-server", "worker"]

    def test_failure_is_counted_not_raised(self, transport, app_tags, observability) -> None:
        """
        SCENARIO: Transport rejects the heartbeat
        EXPECTED: beat() returns False, failure counted and recorded
        """
        heartbeater = make_heartbeater(transport, app_tags, observability=observability)
        transport.fail_next(1)

        assert heartbeater.beat() is False
        assert heartbeater.failures == 1
        assert heartbeater.beats_sent == 0
        assert len(observability.get_events("heartbeat_failed")) == 1

    def test_beat_after_close_sends_nothing(self, transport, app_tags) -> None:
        """
        SCENARIO: beat() called directly after close()
        EXPECTED: Returns False, transport never called, nothing counted
        """
        heartbeater = make_heartbeater(transport, app_tags)
        heartbeater.start()
        heartbeater.close()

        assert heartbeater.beat() is False
        assert transport.send_attempts == 0
        assert heartbeater.beats_sent == 0
        assert heartbeater.failures == 0

    @pytest.mark.parametrize(
        "components, source",
        [([], "h"), (["http-server"], "")],
    )
    def test_validation(self, transport, app_tags, components, source) -> None:
        with pytest.raises(InvalidConfiguration):
            HeartbeaterService(transport, app_tags, components, source)

    def test_requires_transport(self, app_tags) -> None:
        with pytest.raises(InvalidConfiguration):
            HeartbeaterService(None, app_tags, ["http-server"], "h")


class TestSchedule:
    """Test cases for the heartbeat timer."""

    def test_no_beat_before_start(self, transport, app_tags) -> None:
        make_heartbeater(transport, app_tags, interval_seconds=0.05, initial_delay_seconds=0)
        time.sleep(0.15)

        assert transport.send_attempts == 0

    def test_beats_after_initial_delay(self, transport, app_tags) -> None:
        heartbeater = make_heartbeater(
            transport, app_tags, interval_seconds=0.05, initial_delay_seconds=0.05
        )

        heartbeater.start()
        time.sleep(0.3)
        heartbeater.close()

        assert heartbeater.beats_sent >= 2

    def test_no_beats_after_close(self, transport, app_tags) -> None:
        """
        SCENARIO: Heartbeater closed after running
        EXPECTED: Zero sends in the two intervals after close() returns
        """
        heartbeater = make_heartbeater(
            transport, app_tags, interval_seconds=0.1, initial_delay_seconds=0
        )
        heartbeater.start()
        time.sleep(0.25)

        assert heartbeater.close() is True
        attempts = transport.send_attempts
        time.sleep(0.2)

        assert transport.send_attempts == attempts
        assert heartbeater.state == LifecycleState.STOPPED

    def test_close_is_idempotent(self, transport, app_tags) -> None:
        heartbeater = make_heartbeater(transport, app_tags)
        heartbeater.start()

        assert heartbeater.close() is True
        assert heartbeater.close() is False

    def test_context_manager(self, transport, app_tags) -> None:
        with make_heartbeater(transport, app_tags) as heartbeater:
            assert heartbeater.state == LifecycleState.RUNNING

        assert heartbeater.state == LifecycleState.STOPPED
