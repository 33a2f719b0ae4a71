"""
Version Manager - SDK Version Reporting.

Resolves the installed version of the reporter distribution and encodes it
as a single number for the SDK self-metrics "version" gauge:

    "1.2.3"  -> 1.0203
    "0.4.0"  -> 0.0400
    "2.10"   -> 2.1000

Design Notes:
    - Minor and patch are zero-padded to two digits each
    - A missing distribution or unparsable version yields 0.0
"""

from __future__ import annotations

import hashlib
import json
import platform
import re
from dataclasses import dataclass
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict, Optional

from telemetry_reporter import __version__

DISTRIBUTION_NAME = "telemetry-reporter"

_SEMVER_PATTERN = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?")


def semver_to_gauge(version_string: str) -> float:
    """
    Encode a semantic version as major.MMPP.

    Args:
        version_string: Version such as "1.2.3" or "1.2.3rc1"

    Returns:
        Encoded version, 0.0 if the string does not start with major.minor
    """
    match = _SEMVER_PATTERN.match(version_string or "")
    if not match:
        return 0.0
    major, minor, patch = match.group(1), match.group(2), match.group(3) or "0"
    if int(minor) > 99 or int(patch) > 99:
        return 0.0
    return float(f"{int(major)}.{int(minor):02d}{int(patch):02d}")


@dataclass
class VersionMetadata:
    """Version metadata attached to reporter descriptions."""
    sdk_version: str
    semver_gauge: float
    python_version: str
    config_hash: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "sdk_version": self.sdk_version,
            "semver_gauge": self.semver_gauge,
            "python_version": self.python_version,
            "config_hash": self.config_hash,
            "timestamp": self.timestamp,
        }


class VersionManager:
    """Looks up and encodes the reporter's own version."""

    def __init__(self, distribution: str = DISTRIBUTION_NAME) -> None:
        """
        Initialize version manager.

        Args:
            distribution: Distribution name to look up in installed metadata
        """
        self.distribution = distribution

    def get_version(self) -> str:
        """Installed distribution version, or the package version."""
        try:
            return version(self.distribution)
        except PackageNotFoundError:
            return __version__

    def get_semver_gauge(self) -> float:
        """Installed version encoded for the version gauge."""
        return semver_to_gauge(self.get_version())

    def get_version_metadata(self, config: Optional[Any] = None) -> VersionMetadata:
        """
        Get complete version metadata.

        Args:
            config: ReporterConfig to hash (optional)
        """
        sdk_version = self.get_version()
        return VersionMetadata(
            sdk_version=sdk_version,
            semver_gauge=semver_to_gauge(sdk_version),
            python_version=platform.python_version(),
            config_hash=self.compute_config_hash(config) if config else "no_config",
            timestamp=datetime.now().isoformat(),
        )

    def compute_config_hash(self, config: Any) -> str:
        """
        Compute SHA256 hash of configuration.

        Returns:
            First 16 hex chars of the hash
        """
        if hasattr(config, "model_dump"):
            config_dict = config.model_dump()
        elif isinstance(config, dict):
            config_dict = config
        else:
            config_dict = {"raw": str(config)}

        config_json = json.dumps(config_dict, sort_keys=True, default=str)
        return hashlib.sha256(config_json.encode()).hexdigest()[:16]
