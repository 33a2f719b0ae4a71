"""
Integration Tests - End-to-End Reporter Tests.

These tests start real timer threads against an InMemoryTransport and
verify what arrives at the transport over time.

Test Files:
    - test_reporter_end_to_end.py: Facade flush cadence and shutdown
    - test_concurrent_mutations.py: Mutations racing with flushes
"""
