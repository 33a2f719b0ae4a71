"""
Resilience Package - Error Taxonomy and Failure Isolation.

This package provides:
    - The reporter's exception hierarchy
    - ErrorHandler: guarded transport sends and best-effort shutdown

Design Principles:
    - Fail fast for configuration and identity errors
    - Never propagate transport failures to mutation callers
    - Drop failed batches instead of buffering them
"""

from telemetry_reporter.resilience.errors import (
    IdentityConflict,
    InvalidConfiguration,
    InvalidIdentity,
    InvalidSampler,
    TelemetryReporterError,
    TransportError,
)
from telemetry_reporter.resilience.error_handler import ErrorHandler, PartialResult

__all__ = [
    "ErrorHandler",
    "PartialResult",
    "IdentityConflict",
    "InvalidConfiguration",
    "InvalidIdentity",
    "InvalidSampler",
    "TelemetryReporterError",
    "TransportError",
]
