"""
Unify: make two watchable objects share one listener registry.

After ``unify(a, b)`` a listener added to either object is seen by both,
firing on either reaches it, and removing it through either removes it
for both. There is no way to separate them again.

Relayers are not shared; each object keeps its own.
"""

from __future__ import annotations

import logging
from typing import Any

from watchable.core import is_watchable
from watchable.exceptions import NotWatchableError
from watchable.registry import ListenerRegistry
from watchable.slots import slot_merge

logger = logging.getLogger(__name__)


def unify(first: Any, second: Any) -> None:
    """
    Merge the listener registries of two watchable objects.

    Where both already have listeners for an event, ``first``'s listeners
    run before ``second``'s. An object gaining listeners for an event it
    had none for is told through its ``on_event_watch`` hook, if it has one.

    Safe to call during a dispatch on either object; the running dispatch
    keeps the listeners it started with.

    Args:
        first: Watchable whose registry survives
        second: Watchable that is repointed at first's registry

    Raises:
        NotWatchableError: If either argument is not watchable
    """
    for obj in (first, second):
        if not is_watchable(obj):
            raise NotWatchableError(obj)

    target = first._event_registry
    incoming = second._event_registry

    if target is None:
        if incoming is None:
            incoming = second._event_registry = ListenerRegistry()
        first._event_registry = incoming
        for event in incoming:
            first._notify_watch(event)
        shared = incoming

    elif incoming is None:
        second._event_registry = target
        for event in target:
            second._notify_watch(event)
        shared = target

    elif target is not incoming:
        first_only = [event for event in target if event not in incoming]

        for event in incoming:
            existing = target[event]
            target[event] = slot_merge(existing, incoming[event])
            if existing is None:
                first._notify_watch(event)

        second._event_registry = target
        for event in first_only:
            second._notify_watch(event)
        shared = target

    else:
        return

    logger.debug(
        "Unified listeners of %s and %s (%d event(s))",
        type(first).__name__,
        type(second).__name__,
        len(shared),
        extra={
            "first": type(first).__name__,
            "second": type(second).__name__,
            "event_count": len(shared),
        },
    )


__all__ = ["unify"]
