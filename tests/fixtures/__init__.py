"""
Shared test fixtures for the watchable library.

Usage:
    from tests.fixtures import (
        HOST_CLASSES,
        AppliedHost,
        DecoratedHost,
        SubclassHost,
        WatchingHost,
        ResolvingHost,
        Recorder,
        Scope,
    )
"""

from tests.fixtures.hosts import (
    HOST_CLASSES,
    AppliedHost,
    DecoratedHost,
    ResolvingHost,
    SubclassHost,
    WatchingHost,
)
from tests.fixtures.listeners import Recorder, Scope

__all__ = [
    # Hosts
    "HOST_CLASSES",
    "AppliedHost",
    "DecoratedHost",
    "ResolvingHost",
    "SubclassHost",
    "WatchingHost",
    # Listeners
    "Recorder",
    "Scope",
]
