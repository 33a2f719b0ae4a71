"""
Observability Package - The Reporter Watching Itself.

This package provides:
    - ObservabilityManager: structured event log (structlog)
    - HealthMonitor: reporter health checks
    - VersionManager: SDK version lookup and encoding

Design Principles:
    - Every component takes the manager as an optional collaborator
    - Background failures surface here, never in mutation calls
"""

from telemetry_reporter.observability.observability_manager import (
    ObservabilityManager,
)
from telemetry_reporter.observability.health_monitor import (
    HealthMonitor,
    HealthStatus,
)
from telemetry_reporter.observability.version_manager import (
    VersionManager,
)

__all__ = [
    "ObservabilityManager",
    "HealthMonitor",
    "HealthStatus",
    "VersionManager",
]
