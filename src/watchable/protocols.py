"""
Protocol definitions for objects that take part in event dispatch.

Hosts opt in to optional behavior by defining methods; these protocols
name those methods so callers can type against them and the library can
check for them.

Protocols:
- EventTarget: Anything with ``fire(event, *args)``, e.g. a relay target
- ScopeResolver: Host able to turn a scope key into the object to call
- EventWatcher: Host told when an event gains its first listener or loses
  its last

Example:
    >>> class Controller(Watchable):
    ...     def resolve_listener_scope(self, scope, callback, entry):
    ...         return self.views[scope]
    ...
    ...     def on_event_watch(self, event: str) -> None:
    ...         self.backend.subscribe(event)
    ...
    ...     def on_event_unwatch(self, event: str) -> None:
    ...         self.backend.unsubscribe(event)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from watchable.entries import ListenerEntry


@runtime_checkable
class EventTarget(Protocol):
    """Protocol for objects events can be fired on."""

    def fire(self, event: str, *args: Any) -> Any:
        """
        Dispatch an event synchronously.

        Args:
            event: Event name
            *args: Positional arguments passed to each listener
        """
        ...


@runtime_checkable
class ScopeResolver(Protocol):
    """
    Protocol for hosts that resolve listener scopes at fire time.

    Needed by listeners registered by method name without a scope object,
    or registered with a string scope key.
    """

    def resolve_listener_scope(self, scope: Any, callback: Any, entry: ListenerEntry) -> Any:
        """
        Get the object a listener should be called against.

        Args:
            scope: Scope given at registration (a key, or None)
            callback: Method name or callable given at registration
            entry: The listener entry being invoked

        Returns:
            The object to look the method up on, or to bind the callable to
        """
        ...


@runtime_checkable
class EventWatcher(Protocol):
    """Protocol for hosts notified of listener presence transitions."""

    def on_event_watch(self, event: str) -> None:
        """Called when ``event`` gains its first listener."""
        ...

    def on_event_unwatch(self, event: str) -> None:
        """Called when ``event`` loses its last listener."""
        ...


__all__ = [
    "EventTarget",
    "ScopeResolver",
    "EventWatcher",
]
