"""
Telemetry Reporter - In-Process Metric Aggregation and Scheduled Flush.

Application code records counters, delta counters, gauges and histograms.
The reporter aggregates them in memory and flushes them on a fixed schedule
to an injected transport. An SDK self-metrics reporter and a heartbeater run
alongside on their own timers.

Architecture:
    - Ports & Adapters: the Transport protocol is the only outbound port
    - Dependency Injection: transport and config are passed in, never
      looked up globally
    - One timer thread per reporter and one for the heartbeater

Main Components:
    - domain: Value types (MetricIdentity, MetricPoint, ApplicationTags)
    - metrics: Counter, DeltaCounter, Gauge/Sampler, WindowedHistogram
    - registry: Thread-safe identity -> aggregate store
    - scheduling: Fixed-rate timers and the flush scheduler
    - reporting: Reporter, HeartbeaterService, DualReporterFacade
    - adapters: Transport implementations
    - config: Configuration models and loaders

Example:
    >>> from telemetry_reporter import build_reporter, ApplicationTags
    >>> from telemetry_reporter.adapters import LoggingTransport
    >>> tags = ApplicationTags(application="shop", service="orders")
    >>> reporter = build_reporter(LoggingTransport(), tags, reporting_interval_seconds=30)
    >>> reporter.start()
    >>> reporter.increment_counter("requests", {"path": "/orders"})
    >>> reporter.stop()
"""

import logging

__version__ = "0.1.0"

from telemetry_reporter.domain.entities import ApplicationTags, MetricIdentity
from telemetry_reporter.reporting.facade import DualReporterFacade, build_reporter


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Telemetry Reporter.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import telemetry_reporter
        >>> telemetry_reporter.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("telemetry_reporter").setLevel(level)


__all__ = [
    "ApplicationTags",
    "DualReporterFacade",
    "MetricIdentity",
    "build_reporter",
    "configure_logging",
]
