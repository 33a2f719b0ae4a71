"""
Registry Package - Metric Aggregate Storage.

This package provides the thread-safe MetricRegistry that maps metric
identities to their aggregates and produces flush batches.
"""

from telemetry_reporter.registry.metric_registry import MetricRegistry

__all__ = ["MetricRegistry"]
