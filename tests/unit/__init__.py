"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested with an in-memory transport and, where time
matters, an injected fake clock. Unit tests should be fast, deterministic,
and focused.

Test Files:
    - test_entities.py: Identities, points, application tags
    - test_metrics.py: Counter, gauge and histogram aggregates
    - test_metric_registry.py: Registry identity rules and drain
    - test_periodic_task.py / test_flush_scheduler.py: Timers
    - test_reporter.py / test_heartbeater.py / test_facade.py: Reporting
    - test_config_loader.py: Configuration loading/validation
"""
