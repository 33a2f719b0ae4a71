"""
Unit Tests for PeriodicTask.

Test Aspects Covered:
    ✅ Business Logic: Ticks at the configured rate
    ✅ State: CREATED -> RUNNING -> STOPPED, no restart
    ✅ Idempotency: Repeated start/stop
    ✅ Error Handling: Failing actions do not stop the cadence
    ✅ Time Logic: First tick after one interval, bounded stop
"""

from __future__ import annotations

import threading
import time

import pytest

from telemetry_reporter.domain.entities import LifecycleState
from telemetry_reporter.resilience.errors import InvalidConfiguration
from telemetry_reporter.scheduling.periodic_task import PeriodicTask


class TestLifecycle:
    """Test cases for lifecycle transitions."""

    def test_initial_state(self) -> None:
        task = PeriodicTask("t", lambda: None, interval_seconds=1)

        assert task.state == LifecycleState.CREATED
        assert not task.is_running

    def test_start_then_stop(self) -> None:
        """
        SCENARIO: Task started and stopped
        EXPECTED: RUNNING after start, STOPPED after stop
        """
        task = PeriodicTask("t", lambda: None, interval_seconds=10)

        assert task.start() is True
        assert task.state == LifecycleState.RUNNING
        assert task.stop() is True
        assert task.state == LifecycleState.STOPPED

    def test_double_start_and_double_stop(self) -> None:
        """
        SCENARIO: start() and stop() each called twice
        EXPECTED: Second calls are no-ops returning False
        """
        task = PeriodicTask("t", lambda: None, interval_seconds=10)

        task.start()
        assert task.start() is False
        task.stop()
        assert task.stop() is False

    def test_cannot_restart(self) -> None:
        task = PeriodicTask("t", lambda: None, interval_seconds=10)
        task.start()
        task.stop()

        assert task.start() is False
        assert task.state == LifecycleState.STOPPED

    def test_stop_before_start_is_terminal(self) -> None:
        """
        SCENARIO: stop() on a task that was never started
        EXPECTED: Becomes STOPPED and cannot be started
        """
        task = PeriodicTask("t", lambda: None, interval_seconds=10)

        assert task.stop() is True
        assert task.start() is False
        assert task.state == LifecycleState.STOPPED

    @pytest.mark.parametrize("interval", [0, -1, None])
    def test_rejects_invalid_interval(self, interval) -> None:
        with pytest.raises(InvalidConfiguration):
            PeriodicTask("t", lambda: None, interval_seconds=interval)

    def test_rejects_negative_initial_delay(self) -> None:
        with pytest.raises(InvalidConfiguration):
            PeriodicTask("t", lambda: None, interval_seconds=1, initial_delay_seconds=-1)

    def test_rejects_missing_action(self) -> None:
        with pytest.raises(InvalidConfiguration):
            PeriodicTask("t", None, interval_seconds=1)


class TestTiming:
    """Test cases for tick timing."""

    def test_first_tick_after_one_interval(self) -> None:
        """
        SCENARIO: 0.5s interval, observed 0.2s after start
        EXPECTED: No tick yet
        """
        ticks = []
        task = PeriodicTask("t", lambda: ticks.append(1), interval_seconds=0.5)

        task.start()
        time.sleep(0.2)
        task.stop()

        assert ticks == []

    def test_ticks_repeatedly(self) -> None:
        """
        SCENARIO: 0.05s interval, run for 0.4s
        EXPECTED: Several ticks
        """
        task = PeriodicTask("t", lambda: None, interval_seconds=0.05)

        task.start()
        time.sleep(0.4)
        task.stop()

        assert task.tick_count >= 3

    def test_initial_delay_zero_fires_immediately(self) -> None:
        fired = threading.Event()
        task = PeriodicTask(
            "t", fired.set, interval_seconds=10, initial_delay_seconds=0
        )

        task.start()
        assert fired.wait(1.0)
        task.stop()

    def test_failing_action_keeps_cadence(self) -> None:
        """
        SCENARIO: Action raises on every tick
        EXPECTED: Timer keeps ticking
        """
        def failing() -> None:
            raise RuntimeError("boom")

        task = PeriodicTask("t", failing, interval_seconds=0.05)

        task.start()
        time.sleep(0.3)
        task.stop()

        assert task.tick_count >= 2

    def test_no_tick_after_stop_returns(self) -> None:
        """
        SCENARIO: Task stopped while running
        EXPECTED: Tick count frozen once stop() returns
        """
        task = PeriodicTask("t", lambda: None, interval_seconds=0.02)
        task.start()
        time.sleep(0.1)

        task.stop()
        count = task.tick_count
        time.sleep(0.1)

        assert task.tick_count == count

    def test_stop_waits_for_in_flight_tick(self) -> None:
        """
        SCENARIO: stop() called while a tick is running
        EXPECTED: stop() returns after the tick finished
        """
        entered = threading.Event()
        finished = threading.Event()

        def slow() -> None:
            entered.set()
            time.sleep(0.2)
            finished.set()

        task = PeriodicTask("t", slow, interval_seconds=10, initial_delay_seconds=0)
        task.start()
        entered.wait(1.0)

        task.stop()

        assert finished.is_set()

    def test_stop_is_bounded(self, observability) -> None:
        """
        SCENARIO: In-flight tick outlives the stop timeout
        EXPECTED: stop() returns after the timeout and records stop_timeout
        """
        entered = threading.Event()
        release = threading.Event()

        def stuck() -> None:
            entered.set()
            release.wait(5.0)

        task = PeriodicTask(
            "t",
            stuck,
            interval_seconds=10,
            initial_delay_seconds=0,
            observability=observability,
        )
        task.start()
        entered.wait(1.0)

        started = time.monotonic()
        task.stop(timeout=0.1)
        elapsed = time.monotonic() - started
        release.set()

        assert elapsed < 1.0
        assert len(observability.get_events("stop_timeout")) == 1
