"""
Configuration Loader - YAML Loading with Validation.

Loads reporter configuration from YAML files, applies environment variable
overrides and validates the result using Pydantic models.

Environment overrides:
    TELEMETRY_REPORTER_<FIELD> overrides a top-level scalar field, e.g.
    TELEMETRY_REPORTER_REPORTING_INTERVAL_SECONDS=10 or
    TELEMETRY_REPORTER_SOURCE=web-01. Values are coerced by
    Pydantic like any other input.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from telemetry_reporter.config.models import ReporterConfig

ENV_PREFIX = "TELEMETRY_REPORTER_"


class ConfigLoader:
    """Loads and validates configuration from YAML files."""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config paths
            environ: Environment used for overrides (default: os.environ)
        """
        self._base_path = base_path or Path(".")
        self._environ = os.environ if environ is None else environ

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> ReporterConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file
            profile: Optional profile name to merge

        Returns:
            Validated ReporterConfig object

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config is invalid
        """
        path = self._resolve_path(config_path)
        config_dict = self._load_yaml(path)

        if profile:
            profile_dict = self._load_profile(profile)
            config_dict = self._merge_configs(config_dict, profile_dict)

        config_dict = self._apply_env_overrides(config_dict)

        return ReporterConfig.model_validate(config_dict)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> ReporterConfig:
        """Load configuration from dictionary."""
        return ReporterConfig.model_validate(config_dict)

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        """Resolve config path relative to base path."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self._base_path / p

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML file."""
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        """Load profile configuration."""
        profile_path = self._base_path / "config" / "profiles" / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile}")
        return self._load_yaml(profile_path)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay TELEMETRY_REPORTER_* variables onto top-level scalar fields."""
        result = dict(config)
        for field_name in ReporterConfig.model_fields:
            raw = self._environ.get(f"{ENV_PREFIX}{field_name.upper()}")
            if raw is None or isinstance(result.get(field_name), dict):
                continue
            result[field_name] = raw
        return result

    def _merge_configs(
        self,
        base: Dict[str, Any],
        overlay: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Deep merge overlay into base config."""
        result = dict(base)
        for key, value in overlay.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> ReporterConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to YAML config file
        profile: Optional profile name
        base_path: Base path for resolving relative paths

    Returns:
        Validated ReporterConfig object
    """
    loader = ConfigLoader(base_path=base_path)
    return loader.load(config_path, profile)
