"""
Unit Tests for ConfigLoader.

Test Aspects Covered:
    ✅ Business Logic: Config loading, profile merging, env overrides
    ✅ Error Handling: Missing files, invalid values
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from telemetry_reporter.config.loader import ConfigLoader, load_config
from telemetry_reporter.config.models import DEFAULT_PREFIX, ReporterConfig


class TestConfigLoader:
    """Test cases for ConfigLoader."""

    def test_loads_valid_yaml(self, sample_config_path: Path) -> None:
        """
        SCENARIO: Sample configuration file
        EXPECTED: ReporterConfig with file values and defaults
        """
        loader = ConfigLoader(environ={})

        config = loader.load(sample_config_path)

        assert isinstance(config, ReporterConfig)
        assert config.application.application == "shop"
        assert config.application.custom_tags == {"team": "checkout"}
        assert config.reporting_interval_seconds == 30
        assert config.heartbeat_interval_seconds == 120
        assert config.prefix == DEFAULT_PREFIX
        assert config.sdk_metrics_enabled is True

    def test_applies_defaults(self) -> None:
        """
        SCENARIO: Minimal config with only application tags
        EXPECTED: Defaults applied for missing fields
        """
        config = ConfigLoader().load_from_dict(
            {"application": {"application": "shop", "service": "orders"}}
        )

        assert config.reporting_interval_seconds == 60
        assert config.heartbeat_interval_seconds == 300
        assert config.heartbeat_initial_delay_seconds == 1.0
        assert config.histogram_window_seconds == 60
        assert config.source is None
        assert config.health_monitoring.max_consecutive_failures == 3

    def test_missing_file(self, tmp_path: Path) -> None:
        loader = ConfigLoader(base_path=tmp_path)

        with pytest.raises(FileNotFoundError):
            loader.load("missing.yaml")

    def test_rejects_invalid_interval(self) -> None:
        """
        SCENARIO: Reporting interval below one second
        EXPECTED: ValidationError
        """
        with pytest.raises(ValidationError):
            ConfigLoader().load_from_dict(
                {
                    "application": {"application": "shop", "service": "orders"},
                    "reporting_interval_seconds": 0,
                }
            )

    def test_profile_merge(self, tmp_path: Path) -> None:
        """
        SCENARIO: Base config plus a profile overriding nested and scalar fields
        EXPECTED: Deep-merged result
        """
        (tmp_path / "config" / "profiles").mkdir(parents=True)
        (tmp_path / "config.yaml").write_text(
            "application:\n  application: shop\n  service: orders\n"
            "reporting_interval_seconds: 60\n"
        )
        (tmp_path / "config" / "profiles" / "dev.yaml").write_text(
            "reporting_interval_seconds: 5\napplication:\n  cluster: dev\n"
        )
        loader = ConfigLoader(base_path=tmp_path, environ={})

        config = loader.load("config.yaml", profile="dev")

        assert config.reporting_interval_seconds == 5
        assert config.application.cluster == "dev"
        assert config.application.service == "orders"

    def test_missing_profile(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text(
            "application:\n  application: shop\n  service: orders\n"
        )
        loader = ConfigLoader(base_path=tmp_path)

        with pytest.raises(FileNotFoundError, match="Profile not found"):
            loader.load("config.yaml", profile="nope")

    def test_env_overrides(self, sample_config_path: Path) -> None:
        """
        SCENARIO: TELEMETRY_REPORTER_* variables set
        EXPECTED: Scalar fields overridden and coerced
        """
        loader = ConfigLoader(
            environ={
                "TELEMETRY_REPORTER_REPORTING_INTERVAL_SECONDS": "10",
                "TELEMETRY_REPORTER_SOURCE": "web-01",
                "TELEMETRY_REPORTER_SDK_METRICS_ENABLED": "false",
            }
        )

        config = loader.load(sample_config_path)

        assert config.reporting_interval_seconds == 10
        assert config.source == "web-01"
        assert config.sdk_metrics_enabled is False

    def test_env_does_not_replace_sections(self, sample_config_path: Path) -> None:
        loader = ConfigLoader(environ={"TELEMETRY_REPORTER_APPLICATION": "x"})

        config = loader.load(sample_config_path)

        assert config.application.application == "shop"

    def test_load_config_function(self, sample_config_path: Path) -> None:
        config = load_config(sample_config_path)

        assert config.application.service == "orders"
