"""
Host classes for tests.

The same behavior is expected whichever way a class gets its watchable
behavior, so most tests run against every host style listed in
``HOST_CLASSES``.
"""

from __future__ import annotations

from typing import Any

from watchable import EventEmitter, Watchable, apply_to, watchable


class SubclassHost(Watchable):
    """Gets the behavior by inheriting from Watchable."""


@watchable
class DecoratedHost:
    """Gets the behavior from the @watchable decorator."""


class AppliedHost:
    """Gets the behavior from an explicit apply_to() call."""

    def __init__(self, name: str = "applied") -> None:
        self.name = name


apply_to(AppliedHost)


HOST_CLASSES: list[type[Any]] = [SubclassHost, DecoratedHost, AppliedHost, EventEmitter]


class WatchingHost(Watchable):
    """Host that records watch/unwatch notifications."""

    def __init__(self) -> None:
        self.watching: list[str] = []
        self.unwatching: list[str] = []

    def on_event_watch(self, event: str) -> None:
        self.watching.append(event)

    def on_event_unwatch(self, event: str) -> None:
        self.unwatching.append(event)


class ResolvingHost(Watchable):
    """Host that resolves scope keys through a lookup table."""

    def __init__(self, scopes: dict[Any, Any] | None = None) -> None:
        self.scopes = scopes or {}
        self.resolved: list[tuple[Any, Any]] = []

    def resolve_listener_scope(self, scope: Any, callback: Any, entry: Any) -> Any:
        self.resolved.append((scope, callback))
        return self.scopes[scope]
