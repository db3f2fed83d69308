"""
Integration tests for the watchable library.

These exercise the public API end to end: hosts, relays, unify and the
event logger working together.

Run integration tests:
    pytest tests/integration/ -v
"""
