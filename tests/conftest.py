"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from telemetry_reporter.adapters.in_memory_transport import InMemoryTransport
from telemetry_reporter.config.models import ReporterConfig
from telemetry_reporter.domain.entities import ApplicationTags
from telemetry_reporter.observability.observability_manager import ObservabilityManager


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def transport() -> InMemoryTransport:
    """Create in-memory transport for testing."""
    return InMemoryTransport()


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock aligned to a minute boundary."""
    return FakeClock(start=1_700_000_040.0)


@pytest.fixture
def app_tags() -> ApplicationTags:
    """Application tags used by most tests."""
    return ApplicationTags(application="shop", service="orders")


@pytest.fixture
def reporter_config(app_tags: ApplicationTags) -> ReporterConfig:
    """Config with a fixed source and a heartbeat far in the future."""
    return ReporterConfig(
        application=app_tags,
        source="test-host",
        heartbeat_initial_delay_seconds=3600,
    )


@pytest.fixture
def observability() -> ObservabilityManager:
    """Observability manager that leaves structlog configuration alone."""
    return ObservabilityManager(configure=False)
