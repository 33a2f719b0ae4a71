"""
Dual Reporter Facade - The Public Reporter API.

Composes the three background components behind one object:

    - primary reporter: application metrics, prefix "http.server",
      configurable interval (default 60s)
    - SDK reporter: self-metrics, prefix "~sdk.python.http", fixed 60s
      interval, carries one "version" gauge
    - heartbeater: liveness points for the "http-server" component

Mutation calls only ever reach the primary reporter.

Example:
    >>> transport = InMemoryTransport()
    >>> tags = ApplicationTags(application="shop", service="orders")
    >>> reporter = build_reporter(transport, tags, reporting_interval_seconds=30)
    >>> reporter.start()
    >>> reporter.increment_counter("requests", {"path": "/orders"})
    >>> reporter.stop()
"""

from __future__ import annotations

import logging
import socket
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from telemetry_reporter.config.loader import ConfigLoader
from telemetry_reporter.config.models import (
    HEARTBEAT_COMPONENT,
    SDK_METRIC_PREFIX,
    SDK_METRICS_INTERVAL_SECONDS,
    ReporterConfig,
)
from telemetry_reporter.domain.entities import ApplicationTags, LifecycleState
from telemetry_reporter.interfaces.transport import Transport
from telemetry_reporter.metrics.gauge import Sampler
from telemetry_reporter.observability.version_manager import VersionManager
from telemetry_reporter.reporting.heartbeater import HeartbeaterService
from telemetry_reporter.reporting.reporter import Reporter
from telemetry_reporter.resilience.error_handler import ErrorHandler
from telemetry_reporter.resilience.errors import InvalidConfiguration
from telemetry_reporter.scheduling.flush_scheduler import FlushStats

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "unknown"


def resolve_source(source: Optional[str] = None) -> str:
    """Return source, or the local host name, or "unknown"."""
    if source:
        return source
    try:
        return socket.gethostname() or UNKNOWN_SOURCE
    except OSError as e:
        logger.warning(f"Could not resolve host name, using '{UNKNOWN_SOURCE}': {e}")
        return UNKNOWN_SOURCE


class DualReporterFacade:
    """
    Single logical reporter fanning out to the primary and SDK reporters.

    Lifecycle:
        CREATED --start()--> RUNNING --stop()--> STOPPED (terminal)
    """

    def __init__(
        self,
        transport: Transport,
        config: ReporterConfig,
        observability: Optional[Any] = None,
        version_manager: Optional[VersionManager] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize facade.

        Args:
            transport: Transport shared by both reporters and the heartbeater
            config: Validated reporter configuration
            observability: ObservabilityManager for events (optional)
            version_manager: Source of the SDK version gauge value
            clock: Wall-clock source in epoch seconds

        Raises:
            InvalidConfiguration: If transport or config is missing
        """
        if transport is None:
            raise InvalidConfiguration("transport is required")
        if config is None:
            raise InvalidConfiguration("config is required")
        if config.application is None:
            raise InvalidConfiguration("application tags are required")

        self.config = config
        self.source = resolve_source(config.source)
        self.observability = observability
        self._version_manager = version_manager or VersionManager()
        self._error_handler = ErrorHandler(observability)
        self._lock = threading.Lock()
        self._state = LifecycleState.CREATED

        point_tags = config.application.to_point_tags()

        self._primary = Reporter(
            transport,
            prefix=config.prefix,
            reporter_tags=point_tags,
            source=self.source,
            interval_seconds=config.reporting_interval_seconds,
            name="primary-reporter",
            histogram_window_seconds=config.histogram_window_seconds,
            stop_timeout_seconds=config.stop_timeout_seconds,
            error_handler=self._error_handler,
            observability=observability,
            clock=clock,
        )

        self._sdk_reporter: Optional[Reporter] = None
        if config.sdk_metrics_enabled:
            self._sdk_reporter = Reporter(
                transport,
                prefix=SDK_METRIC_PREFIX,
                reporter_tags=point_tags,
                source=self.source,
                interval_seconds=SDK_METRICS_INTERVAL_SECONDS,
                name="sdk-reporter",
                stop_timeout_seconds=config.stop_timeout_seconds,
                error_handler=self._error_handler,
                observability=observability,
                clock=clock,
            )
            sdk_version = self._version_manager.get_semver_gauge()
            self._sdk_reporter.register_gauge("version", Sampler.constant(sdk_version))

        self._heartbeater = HeartbeaterService(
            transport,
            config.application,
            [HEARTBEAT_COMPONENT],
            self.source,
            interval_seconds=config.heartbeat_interval_seconds,
            initial_delay_seconds=config.heartbeat_initial_delay_seconds,
            stop_timeout_seconds=config.stop_timeout_seconds,
            error_handler=self._error_handler,
            observability=observability,
            clock=clock,
        )

    @classmethod
    def from_config_file(
        cls,
        config_path: Union[str, Path],
        transport: Transport,
        profile: Optional[str] = None,
        observability: Optional[Any] = None,
    ) -> "DualReporterFacade":
        """
        Build a facade from a YAML configuration file.

        Raises:
            InvalidConfiguration: If the file content fails validation
        """
        try:
            config = ConfigLoader().load(config_path, profile)
        except ValidationError as e:
            raise InvalidConfiguration(f"Invalid reporter configuration: {e}") from e
        return cls(transport, config, observability=observability)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> LifecycleState:
        with self._lock:
            return self._state

    @property
    def primary(self) -> Reporter:
        return self._primary

    @property
    def sdk_reporter(self) -> Optional[Reporter]:
        return self._sdk_reporter

    @property
    def heartbeater(self) -> HeartbeaterService:
        return self._heartbeater

    @property
    def reporting_interval_seconds(self) -> int:
        return self.config.reporting_interval_seconds

    @property
    def stats(self) -> FlushStats:
        """Flush statistics of the primary reporter."""
        return self._primary.stats

    def describe(self) -> Dict[str, Any]:
        """Summary of configuration, version and state."""
        metadata = self._version_manager.get_version_metadata(self.config)
        return {
            "state": self.state.value,
            "source": self.source,
            "application": self.config.application.application,
            "service": self.config.application.service,
            "reporting_interval_seconds": self.config.reporting_interval_seconds,
            "sdk_metrics_enabled": self._sdk_reporter is not None,
            "version": metadata.to_dict(),
        }

    # =========================================================================
    # Mutation operations (primary reporter only)
    # =========================================================================

    def increment_counter(self, name: str, tags: Optional[Mapping[str, str]] = None) -> None:
        self._primary.increment_counter(name, tags)

    def increment_counter_by(
        self,
        name: str,
        amount: int,
        tags: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._primary.increment_counter(name, tags, amount=amount)

    def increment_delta_counter(
        self, name: str, tags: Optional[Mapping[str, str]] = None
    ) -> None:
        self._primary.increment_delta_counter(name, tags)

    def register_gauge(
        self,
        name: str,
        accessor: Any,
        tags: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._primary.register_gauge(name, accessor, tags)

    def update_histogram(
        self,
        name: str,
        value: float,
        tags: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._primary.update_histogram(name, value, tags)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> bool:
        """
        Start the primary reporter, the SDK reporter and the heartbeater.

        Returns:
            True if this call started the facade
        """
        with self._lock:
            if self._state != LifecycleState.CREATED:
                logger.warning(f"Ignoring start(): reporter is {self._state.value}")
                return False
            self._state = LifecycleState.RUNNING

            self._primary.start(self.config.reporting_interval_seconds)
            if self._sdk_reporter is not None:
                self._sdk_reporter.start(SDK_METRICS_INTERVAL_SECONDS)
            self._heartbeater.start()

        logger.info(
            f"Reporter started for {self.config.application.application} "
            f"(source={self.source}, interval={self.config.reporting_interval_seconds}s)"
        )
        return True

    def stop(self) -> bool:
        """
        Close the heartbeater, then stop the primary and SDK reporters.

        Every step runs even if an earlier one raises; the first failure is
        re-raised once all steps have run.

        Returns:
            True if this call stopped the facade, False if already stopped
        """
        with self._lock:
            if self._state == LifecycleState.STOPPED:
                return False
            self._state = LifecycleState.STOPPED

        steps = [
            ("heartbeater", self._heartbeater.close),
            ("primary reporter", self._primary.stop),
        ]
        if self._sdk_reporter is not None:
            steps.append(("sdk reporter", self._sdk_reporter.stop))

        result = self._error_handler.run_all(steps, operation_name="reporter stop")
        logger.info("Reporter stopped")
        if result.first_error is not None:
            raise result.first_error
        return True

    def __enter__(self) -> "DualReporterFacade":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()


def build_reporter(
    transport: Transport,
    application_tags: ApplicationTags,
    reporting_interval_seconds: int = 60,
    source: Optional[str] = None,
    observability: Optional[Any] = None,
    **settings: Any,
) -> DualReporterFacade:
    """
    Build a facade from the commonly used options.

    Args:
        transport: Transport shared by all components
        application_tags: Identity of the instrumented application
        reporting_interval_seconds: Primary flush interval
        source: Source name (default: local host name)
        observability: ObservabilityManager for events (optional)
        **settings: Any other ReporterConfig field

    Raises:
        InvalidConfiguration: If a collaborator is missing or a setting is invalid
    """
    if transport is None:
        raise InvalidConfiguration("transport is required")
    if application_tags is None:
        raise InvalidConfiguration("application tags are required")

    try:
        config = ReporterConfig(
            application=application_tags,
            reporting_interval_seconds=reporting_interval_seconds,
            source=source,
            **settings,
        )
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid reporter configuration: {e}") from e

    return DualReporterFacade(transport, config, observability=observability)
