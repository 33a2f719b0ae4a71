"""
Adapters Package - Transport Implementations.

This package contains concrete implementations of the Transport
protocol defined in the interfaces package.

Transports:
    - InMemoryTransport: Keeps batches in memory (tests, local runs)
    - LoggingTransport: Writes points to the log
    - DeltaFramingTransport: Wrapper that frames delta counters

Design Principles:
    - All adapters implement the Transport protocol
    - Easily swappable via Dependency Injection
    - No aggregation logic in adapters
"""

from telemetry_reporter.adapters.in_memory_transport import InMemoryTransport
from telemetry_reporter.adapters.logging_transport import LoggingTransport
from telemetry_reporter.adapters.delta_framing import DeltaFramingTransport

__all__ = [
    "InMemoryTransport",
    "LoggingTransport",
    "DeltaFramingTransport",
]
