"""
Error Taxonomy for the Telemetry Reporter.

Propagation rules:
    - InvalidConfiguration: raised at construction time, fails fast
    - InvalidIdentity / IdentityConflict / InvalidSampler: raised
      synchronously to the code calling a mutation operation
    - TransportError: never raised to mutation callers; flush and
      heartbeat timers log and count it, then drop the batch
"""

from __future__ import annotations


class TelemetryReporterError(Exception):
    """Base class for all reporter errors."""
    pass


class InvalidConfiguration(TelemetryReporterError, ValueError):
    """Raised when a required collaborator or setting is missing or invalid."""
    pass


class InvalidIdentity(TelemetryReporterError, ValueError):
    """Raised when a metric name or tag set is malformed."""
    pass


class IdentityConflict(TelemetryReporterError):
    """Raised when an identity is reused for a different metric kind."""

    def __init__(self, identity: object, existing_kind: str, requested_kind: str) -> None:
        super().__init__(
            f"Metric {identity} is registered as {existing_kind}, "
            f"cannot use it as {requested_kind}"
        )
        self.identity = identity
        self.existing_kind = existing_kind
        self.requested_kind = requested_kind


class InvalidSampler(TelemetryReporterError, TypeError):
    """Raised when a gauge accessor cannot be sampled."""
    pass


class TransportError(TelemetryReporterError):
    """Raised when the transport fails to accept a batch."""
    pass
