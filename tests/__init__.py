"""
Test Suite for Telemetry Reporter.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Tests running real timer threads end to end
    - fixtures/: Shared sample configuration

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
    pytest -m "not slow"                    # Skip timer-driven tests
"""
