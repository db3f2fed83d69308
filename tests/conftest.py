"""
Shared pytest fixtures for the watchable library tests.

Fixtures:
- host_class: parametrized over every way of making a class watchable
- host / other: two fresh instances of host_class
- calls: shared call log for Recorder listeners
- watching_host: host recording watch/unwatch notifications
"""

from __future__ import annotations

from typing import Any

import pytest

from tests.fixtures import HOST_CLASSES, WatchingHost


@pytest.fixture(params=HOST_CLASSES, ids=lambda cls: cls.__name__)
def host_class(request: pytest.FixtureRequest) -> type[Any]:
    """Each watchable host style in turn."""
    return request.param


@pytest.fixture
def host(host_class: type[Any]) -> Any:
    """A fresh watchable host."""
    return host_class()


@pytest.fixture
def other(host_class: type[Any]) -> Any:
    """A second host of the same style, for relay and unify tests."""
    return host_class()


@pytest.fixture
def calls() -> list[str]:
    """Call log shared by Recorder listeners."""
    return []


@pytest.fixture
def watching_host() -> WatchingHost:
    """Host that records watch/unwatch notifications."""
    return WatchingHost()
