"""
Logging Transport.

A transport that writes every point to the log instead of a remote
endpoint. Useful when running locally without a telemetry backend.
"""

from __future__ import annotations

import logging
from typing import Sequence

from telemetry_reporter.domain.entities import MetricKind, MetricPoint

logger = logging.getLogger(__name__)


class LoggingTransport:
    """Transport that logs points, one line each."""

    def __init__(self, level: int = logging.INFO, verbose: bool = True) -> None:
        """
        Initialize logging transport.

        Args:
            level: Log level for point lines
            verbose: If True, log every point. If False, only batch sizes.
        """
        self._level = level
        self._verbose = verbose

    def send(self, batch: Sequence[MetricPoint]) -> None:
        """Log a batch."""
        logger.log(self._level, f"Sending batch of {len(batch)} points")
        if not self._verbose:
            return
        for point in batch:
            logger.log(self._level, self.format_point(point))

    @staticmethod
    def format_point(point: MetricPoint) -> str:
        """Render one point as a single human-readable line."""
        tags = " ".join(f'{k}="{v}"' for k, v in sorted(point.tags.items()))
        source = point.source or "-"
        if point.kind == MetricKind.HISTOGRAM and point.distribution is not None:
            d = point.distribution
            value = f"count={d.count} min={d.min} max={d.max} mean={d.mean}"
        else:
            value = f"{point.value:g}"
        return f"[{point.kind.value:13}] {point.name} {value} source={source} {tags}".rstrip()
