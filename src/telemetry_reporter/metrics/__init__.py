"""
Metrics Package - Aggregate Kinds.

    - Counter / DeltaCounter: cumulative integer counters
    - Gauge + Sampler: values sampled at flush time
    - IntCell: thread-safe integer for gauge-backed state
    - WindowedHistogram: observations grouped per time window
"""

from telemetry_reporter.metrics.counter import Counter, DeltaCounter
from telemetry_reporter.metrics.gauge import Gauge, IntCell, Sampler
from telemetry_reporter.metrics.histogram import WindowedHistogram

__all__ = [
    "Counter",
    "DeltaCounter",
    "Gauge",
    "IntCell",
    "Sampler",
    "WindowedHistogram",
]
