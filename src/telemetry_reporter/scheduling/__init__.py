"""
Scheduling Package - Background Timers.

    - PeriodicTask: fixed-rate timer thread with bounded, idempotent stop
    - FlushScheduler: drains a registry into a transport on a cadence
"""

from telemetry_reporter.scheduling.periodic_task import PeriodicTask
from telemetry_reporter.scheduling.flush_scheduler import FlushScheduler, FlushStats

__all__ = ["PeriodicTask", "FlushScheduler", "FlushStats"]
