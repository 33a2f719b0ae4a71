"""
Domain Layer - Value Types.

Entities:
    - MetricIdentity: name + tag set, the registry key
    - MetricPoint: one flushed value handed to the transport
    - HistogramSnapshot: distribution of one completed window
    - ApplicationTags: identity of the instrumented application

Design Principles:
    - Immutable (frozen dataclasses / frozen Pydantic models)
    - No infrastructure dependencies
"""

from telemetry_reporter.domain.entities import (
    ApplicationTags,
    HistogramSnapshot,
    LifecycleState,
    MetricIdentity,
    MetricKind,
    MetricPoint,
)

__all__ = [
    "ApplicationTags",
    "HistogramSnapshot",
    "LifecycleState",
    "MetricIdentity",
    "MetricKind",
    "MetricPoint",
]
