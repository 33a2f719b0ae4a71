"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from telemetry_reporter.domain.entities import ApplicationTags

DEFAULT_PREFIX = "http.server"
SDK_METRIC_PREFIX = "~sdk.python.http"
SDK_METRICS_INTERVAL_SECONDS = 60
HEARTBEAT_COMPONENT = "http-server"


class HealthMonitorConfig(BaseModel):
    """Thresholds for reporter health checks."""

    enabled: bool = True
    max_consecutive_failures: int = Field(default=3, ge=1)
    max_flush_age_intervals: float = Field(default=3.0, gt=0)


class ReporterConfig(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    application: ApplicationTags
    reporting_interval_seconds: int = Field(default=60, ge=1)
    source: Optional[str] = Field(
        default=None, description="Source name; defaults to the local host name"
    )
    prefix: str = Field(default=DEFAULT_PREFIX, min_length=1)
    sdk_metrics_enabled: bool = True
    heartbeat_interval_seconds: float = Field(default=300.0, gt=0)
    heartbeat_initial_delay_seconds: float = Field(default=1.0, ge=0)
    histogram_window_seconds: int = Field(default=60, ge=1)
    stop_timeout_seconds: float = Field(default=10.0, gt=0)
    health_monitoring: HealthMonitorConfig = Field(
        default_factory=HealthMonitorConfig,
    )

    model_config = {"populate_by_name": True}
