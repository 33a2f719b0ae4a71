"""
Reporting Package - Reporters, Heartbeat and the Public Facade.
"""

from telemetry_reporter.reporting.reporter import Reporter
from telemetry_reporter.reporting.heartbeater import HeartbeaterService
from telemetry_reporter.reporting.facade import (
    DualReporterFacade,
    build_reporter,
    resolve_source,
)

__all__ = [
    "Reporter",
    "HeartbeaterService",
    "DualReporterFacade",
    "build_reporter",
    "resolve_source",
]
