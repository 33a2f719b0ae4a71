"""
Core Domain Entities.

This module defines the value types the reporter operates on:
metric identities, flushed metric points, histogram snapshots and the
application metadata used to tag everything that leaves the process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from telemetry_reporter.resilience.errors import InvalidIdentity

# Normalized tag representation used as part of a hashable key
TagPairs = Tuple[Tuple[str, str], ...]


class MetricKind(str, Enum):
    """Kind of aggregate held for a metric identity."""

    COUNTER = "counter"
    DELTA_COUNTER = "delta_counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


class LifecycleState(str, Enum):
    """Lifecycle shared by reporters, schedulers and the heartbeater."""

    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class MetricIdentity:
    """
    Unique key of one aggregate: a name plus an unordered tag set.

    Tags are kept as a sorted tuple of pairs so that two identities built
    from equal dicts compare and hash equal regardless of insertion order.
    Use MetricIdentity.of() to build one from a plain mapping.
    """

    name: str
    tags: TagPairs = ()

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidIdentity(f"Metric name must be a non-empty string, got {self.name!r}")
        for pair in self.tags:
            if len(pair) != 2:
                raise InvalidIdentity(f"Malformed tag entry {pair!r} for {self.name}")
            key, value = pair
            if not isinstance(key, str) or not key:
                raise InvalidIdentity(f"Tag keys must be non-empty strings, got {key!r}")
            if not isinstance(value, str):
                raise InvalidIdentity(
                    f"Tag value for '{key}' must be a string, got {type(value).__name__}"
                )

    @classmethod
    def of(cls, name: str, tags: Optional[Mapping[str, str]] = None) -> "MetricIdentity":
        """Build an identity from a name and an optional tag mapping."""
        if tags is None:
            return cls(name=name)
        if not isinstance(tags, Mapping):
            raise InvalidIdentity(f"Tags must be a mapping, got {type(tags).__name__}")
        try:
            pairs = tuple(sorted(tags.items()))
        except TypeError as e:
            raise InvalidIdentity(f"Tag keys must be strings: {e}") from e
        return cls(name=name, tags=pairs)

    @property
    def tag_dict(self) -> Dict[str, str]:
        """Tags as a fresh dict."""
        return dict(self.tags)

    def __str__(self) -> str:
        if not self.tags:
            return self.name
        rendered = ",".join(f"{k}={v}" for k, v in self.tags)
        return f"{self.name}{{{rendered}}}"


@dataclass(frozen=True)
class HistogramSnapshot:
    """Distribution summary of one completed histogram window."""

    window_start: float
    window_seconds: float
    values: Tuple[float, ...]

    @property
    def count(self) -> int:
        return len(self.values)

    @property
    def min(self) -> Optional[float]:
        return min(self.values) if self.values else None

    @property
    def max(self) -> Optional[float]:
        return max(self.values) if self.values else None

    @property
    def sum(self) -> float:
        return float(sum(self.values))

    @property
    def mean(self) -> Optional[float]:
        if not self.values:
            return None
        return self.sum / len(self.values)


@dataclass(frozen=True)
class MetricPoint:
    """A single flushed value handed to the transport."""

    name: str
    value: float
    kind: MetricKind
    tags: Dict[str, str] = field(default_factory=dict)
    timestamp: Optional[float] = None
    source: Optional[str] = None
    distribution: Optional[HistogramSnapshot] = None


class ApplicationTags(BaseModel):
    """Metadata about the instrumented application, fixed at construction."""

    application: str = Field(..., min_length=1, description="Application name")
    service: str = Field(..., min_length=1, description="Service name")
    cluster: str = Field(default="none", description="Cluster the service runs in")
    shard: str = Field(default="none", description="Shard of the service")
    custom_tags: Dict[str, str] = Field(
        default_factory=dict, description="Extra tags attached to every point"
    )

    model_config = {"frozen": True}

    def to_point_tags(self) -> Dict[str, str]:
        """Reporter-level tags: the application plus any custom tags."""
        tags = {"application": self.application}
        tags.update(self.custom_tags)
        return tags

    def to_heartbeat_tags(self) -> Dict[str, str]:
        """Tags identifying this component in heartbeat points."""
        tags = {
            "application": self.application,
            "service": self.service,
            "cluster": self.cluster,
            "shard": self.shard,
        }
        tags.update(self.custom_tags)
        return tags
