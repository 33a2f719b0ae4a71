"""
Gauges and Samplers.

A gauge holds no value of its own. It wraps a Sampler, a zero-argument
callable evaluated only when the registry is drained, so the flushed value
always reflects live state owned by the caller.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Union

from telemetry_reporter.domain.entities import MetricKind
from telemetry_reporter.resilience.errors import InvalidSampler


@dataclass(frozen=True)
class Sampler:
    """Value type wrapping a no-argument function that returns a number."""

    fn: Callable[[], float]

    @classmethod
    def of(cls, accessor: Union["Sampler", "IntCell", Callable[[], Any]]) -> "Sampler":
        """
        Build a sampler from a supported accessor.

        Args:
            accessor: A Sampler, an IntCell, or any zero-argument callable

        Raises:
            InvalidSampler: If the accessor cannot be sampled
        """
        if isinstance(accessor, Sampler):
            return accessor
        if isinstance(accessor, IntCell):
            return cls(accessor.get)
        if callable(accessor):
            return cls(accessor)
        raise InvalidSampler(f"Cannot sample {type(accessor).__name__}; expected a callable")

    @classmethod
    def constant(cls, value: float) -> "Sampler":
        """Sampler that always returns the same value."""
        fixed = float(value)
        return cls(lambda: fixed)

    def sample(self) -> float:
        """Evaluate the accessor and coerce the result to float."""
        value = self.fn()
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise TypeError(f"Sampler returned non-numeric value {value!r}")
        return float(value)


class Gauge:
    """Gauge bound to a sampler; the first sampler registered is kept."""

    kind = MetricKind.GAUGE

    def __init__(self, sampler: Sampler) -> None:
        self.sampler = sampler

    def value(self) -> float:
        return self.sampler.sample()


class IntCell:
    """
    Thread-safe integer holder for values exposed through a gauge.

    Typical use is tracking in-flight work:

        active = IntCell()
        reporter.register_gauge("requests.inflight", active)
        active.increment()
        ...
        active.decrement()
    """

    def __init__(self, initial: int = 0) -> None:
        self._value = initial
        self._lock = Lock()

    def get(self) -> int:
        with self._lock:
            return self._value

    def set(self, value: int) -> None:
        with self._lock:
            self._value = value

    def increment(self, amount: int = 1) -> int:
        with self._lock:
            self._value += amount
            return self._value

    def decrement(self, amount: int = 1) -> int:
        return self.increment(-amount)
