"""
Listener entries: what gets stored in a slot and how it is called.

A listener is registered as a callable or as the name of a method, with
an optional scope. The entry records which of three call styles applies:

- ``DIRECT``: call the callable; a plain function registered with a scope
  receives the scope as its first argument, the way a method receives self
- ``NAMED``: look the method name up on the scope object at fire time
- ``NAMED_RESOLVED``: ask the host's ``resolve_listener_scope()`` for the
  object to call; used when the scope is a string key or a method name was
  given with no scope

Entries compare by identity. Two registrations are considered the same
listener when their unwrapped callbacks and scopes match (see ``matches``).
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from watchable.exceptions import InvalidListenerError, ScopeResolutionError
from watchable.protocols import ScopeResolver


class ListenerKind(Enum):
    """
    How a listener entry is invoked.

    Values:
        DIRECT: Callable, optionally bound to its scope
        NAMED: Method name looked up on the scope object
        NAMED_RESOLVED: Target object supplied by the host's resolver
    """

    DIRECT = "direct"
    NAMED = "named"
    NAMED_RESOLVED = "named_resolved"


@dataclass(frozen=True, eq=False)
class ListenerEntry:
    """
    One registered listener.

    Attributes:
        callback: Callable, or method name for named listeners
        scope: Object (or resolver key) the listener is called against
        kind: Invocation style
        original: Callback guarded by a ``once`` wrapper; matching looks
            through the wrapper to this
        owner_event: Event the entry was registered for, recorded only for
            entries owned by a subscription token
    """

    callback: Any
    scope: Any = None
    kind: ListenerKind = ListenerKind.DIRECT
    original: Any = None
    owner_event: str | None = None

    @property
    def needs_resolution(self) -> bool:
        return self.kind is ListenerKind.NAMED_RESOLVED

    @property
    def unwrapped(self) -> Any:
        """The callback this entry stands for, looking through once wrappers."""
        return self.original if self.original is not None else self.callback

    @property
    def name(self) -> str:
        return get_listener_name(self.unwrapped)


def get_listener_name(callback: Any) -> str:
    """
    Get a descriptive name for a listener for logging and debugging.

    Args:
        callback: Callable or method name

    Returns:
        String name for the listener
    """
    if isinstance(callback, str):
        return callback
    name = getattr(callback, "__qualname__", None) or getattr(callback, "__name__", None)
    if name:
        return str(name)
    return type(callback).__name__


def supports_scope_resolution(host: Any) -> bool:
    return isinstance(host, ScopeResolver) and callable(host.resolve_listener_scope)


def make_entry(
    host: Any,
    event: str,
    callback: Any,
    scope: Any = None,
    *,
    original: Any = None,
    owner_event: str | None = None,
) -> ListenerEntry:
    """
    Build a listener entry, validating it against the host.

    Raises:
        ScopeResolutionError: If the listener needs the host's
            ``resolve_listener_scope()`` and the host has none
        InvalidListenerError: If callback is neither callable nor a string
    """
    named = isinstance(callback, str)

    if not named and not callable(callback):
        raise InvalidListenerError(event, callback)

    if isinstance(scope, str) or (named and scope is None):
        if not supports_scope_resolution(host):
            raise ScopeResolutionError(type(host).__name__, event)
        kind = ListenerKind.NAMED_RESOLVED
    elif named:
        kind = ListenerKind.NAMED
    else:
        kind = ListenerKind.DIRECT

    return ListenerEntry(
        callback=callback,
        scope=scope,
        kind=kind,
        original=original,
        owner_event=owner_event,
    )


def _same_scope(left: Any, right: Any) -> bool:
    if left is right:
        return True
    return isinstance(left, str) and isinstance(right, str) and left == right


def matches(entry: ListenerEntry, callback: Any, scope: Any = None) -> bool:
    """
    Check whether an entry stands for the given (callback, scope) pair.

    Callbacks compare with ``==`` so that two bound-method objects for the
    same function and instance match; scopes compare by identity, except
    resolver keys (strings) which compare by value.
    """
    return entry.unwrapped == callback and _same_scope(entry.scope, scope)


def invoke_entry(host: Any, entry: ListenerEntry, args: Sequence[Any]) -> Any:
    """
    Call a listener entry with the fired arguments.

    Args:
        host: The object firing the event (consulted for scope resolution)
        entry: Entry to call
        args: Positional arguments passed to fire()

    Returns:
        Whatever the listener returns
    """
    callback = entry.callback

    if entry.original is not None:
        # once wrappers carry their own scope handling
        return callback(*args)

    target = entry.scope
    if entry.kind is ListenerKind.NAMED_RESOLVED:
        target = host.resolve_listener_scope(entry.scope, callback, entry)

    if isinstance(callback, str):
        return getattr(target, callback)(*args)

    return call_with_scope(callback, target, args)


def call_with_scope(callback: Any, scope: Any, args: Sequence[Any]) -> Any:
    """
    Call a callable against a scope.

    Plain functions (including lambdas) are bound to the scope, receiving
    it as their first argument. Bound methods, partials and callable
    objects already carry their own binding and are called as-is.
    """
    if scope is not None and inspect.isfunction(callback):
        return callback(scope, *args)
    return callback(*args)


__all__ = [
    "ListenerKind",
    "ListenerEntry",
    "get_listener_name",
    "supports_scope_resolution",
    "make_entry",
    "matches",
    "invoke_entry",
    "call_with_scope",
]
