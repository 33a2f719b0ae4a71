"""
Transport Protocol.

Defines the interface the reporter uses to hand flushed batches to the
remote telemetry endpoint. The wire format and connection handling live
behind this protocol.

The transport is responsible for:
    - Accepting a batch of MetricPoints and delivering it
    - Raising on failure (any exception is treated as a TransportError)
    - Tolerating concurrent send() calls from up to three timers

Design Notes:
    - Delta counters arrive with their cumulative value; delta framing is
      the transport's job (see adapters.delta_framing)
    - Histogram points carry their HistogramSnapshot in `distribution`
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from telemetry_reporter.domain.entities import MetricPoint


@runtime_checkable
class Transport(Protocol):
    """Abstract interface for metric batch delivery."""

    def send(self, batch: Sequence["MetricPoint"]) -> None:
        """
        Deliver one batch of metric points.

        Args:
            batch: Points produced by one flush or heartbeat tick

        Raises:
            Exception: Any failure; the caller drops the batch
        """
        ...
