"""
Unit Tests for ObservabilityManager.

Test Aspects Covered:
    ✅ Business Logic: Event recording and filtering
    ✅ Edge Cases: Bounded event list
"""

from __future__ import annotations

from telemetry_reporter.observability.observability_manager import ObservabilityManager


class TestObservabilityManager:
    """Test cases for ObservabilityManager."""

    def test_records_events(self, observability) -> None:
        observability.log_event("reporter_started", {"reporter": "primary"})
        observability.log_event("flush_failed", {"points": 3}, level="warning")

        events = observability.get_events()

        assert [e["event_type"] for e in events] == ["reporter_started", "flush_failed"]
        assert observability.get_events("flush_failed")[0]["points"] == 3
        assert "timestamp" in events[0]

    def test_log_anomaly(self, observability) -> None:
        observability.log_anomaly("too many failures", "ERROR", {"check_name": "x"})

        [event] = observability.get_events("anomaly")
        assert event["severity"] == "ERROR"
        assert event["check_name"] == "x"

    def test_max_events(self) -> None:
        """
        SCENARIO: More events than max_events
        EXPECTED: Only the newest are kept
        """
        manager = ObservabilityManager(configure=False, max_events=2)

        for i in range(5):
            manager.log_event("tick", {"i": i})

        assert [e["i"] for e in manager.get_events()] == [3, 4]

    def test_clear(self, observability) -> None:
        observability.log_event("x")
        observability.clear()

        assert observability.get_events() == []
