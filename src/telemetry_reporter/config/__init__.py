"""
Configuration Package - Models and Loaders.

Configuration Structure:
    - ReporterConfig: Root configuration object
    - HealthMonitorConfig: Health check thresholds

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
    - Support for profiles and environment variable overrides
"""

from telemetry_reporter.config.models import HealthMonitorConfig, ReporterConfig
from telemetry_reporter.config.loader import ConfigLoader, load_config

__all__ = ["ConfigLoader", "HealthMonitorConfig", "ReporterConfig", "load_config"]
