"""
Interfaces Package - Protocols for External Collaborators.

Protocols:
    - Transport: accepts serialized metric batches

Design Principles:
    - Components depend on protocols, never on concrete transports
    - Concrete implementations live in the adapters package
"""

from telemetry_reporter.interfaces.transport import Transport

__all__ = ["Transport"]
