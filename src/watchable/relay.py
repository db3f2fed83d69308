"""
Event relays: forwarding one source's events to another target.

A relayer is attached to a source. Every event the source fires (and that
no listener stopped) is handed to each attached relayer, in attachment
order, which decides whether and how to re-fire it on its target.

Mappings:
- None: forward every event unchanged
- a list/tuple/set of names (or a single name): forward those, drop the rest
- a dict: per-event rules, with the wildcard key (default ``"*"``) as the
  fallback. ``True`` forwards under the same name, a string renames, a
  callable handles the event itself, anything falsy drops it
- a callable: handles every event itself

Callables are called with ``(event, args)``; plain functions are bound to
the relayer, so they receive it first, the way a method receives self.

Example:
    >>> link = source.relay_events(target, {"*": True, "internal": False})
    >>> link = source.relay_events(target, {"save": "saved"})
    >>> link = source.relay_events(target, ["change", "load"])
    >>>
    >>> def split(relayer, event, args):
    ...     for item in args[0]:
    ...         relayer.target.fire("item", item)
    >>> link = source.relay_events(target, {"batch": split})
    >>>
    >>> link.close()
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping, Sequence
from types import TracebackType
from typing import Any

from watchable.entries import call_with_scope, get_listener_name
from watchable.protocols import EventTarget
from watchable.slots import ListenerList, slot_add, slot_discard, slot_find

logger = logging.getLogger(__name__)

# Type alias for the mapping forms accepted by Relayer
RelayMapping = Mapping[str, Any] | Iterable[str] | str | Callable[..., Any] | None

DEFAULT_WILDCARD = "*"


class EventRelayer(ABC):
    """
    Capability interface for objects that can be attached as relays.

    ``relay_events()`` attaches an ``EventRelayer`` target as-is instead of
    wrapping it, so callers can build chains of custom relays.

    Attributes:
        source: The host the relayer is attached to (None when detached)
        target: Where forwarded events go
    """

    source: Any = None
    target: Any = None

    @abstractmethod
    def relay(self, event: str, args: Sequence[Any]) -> Any:
        """
        Handle one event fired on the source.

        Args:
            event: Event name as fired on the source
            args: Positional arguments the event was fired with
        """
        ...

    @property
    def attached(self) -> bool:
        """Check if the relayer is currently attached to its source."""
        source = self.source
        if source is None:
            return False
        return slot_find(source._event_relayers, lambda relayer: relayer is self) is not None

    def close(self) -> None:
        """
        Detach from the source.

        Safe to call while the source is firing; the running dispatch still
        reaches every relayer it started with. Closing a detached relayer
        does nothing.
        """
        source = self.source
        if source is None:
            return

        source._event_relayers, removed = slot_discard(source._event_relayers, self)

        if removed:
            logger.debug(
                "Detached %s from %s",
                type(self).__name__,
                type(source).__name__,
                extra={
                    "relayer": type(self).__name__,
                    "source": type(source).__name__,
                },
            )

    def destroy(self) -> None:
        """Alias for close()."""
        self.close()

    def __enter__(self) -> EventRelayer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class Relayer(EventRelayer):
    """
    Relayer driven by a declarative or functional mapping.

    Subclasses can override ``relay()`` to take over mapping entirely, or
    ``forward()`` to change how a mapped event reaches the target.

    Example:
        >>> class Uppercase(Relayer):
        ...     def forward(self, event, args):
        ...         return self.target.fire(event.upper(), *args)
        >>>
        >>> source.relay_events(Uppercase(target=other))

    Attributes:
        map: Normalized per-event rules, or None to forward everything
        wildcard: Map key used for events without a rule of their own
    """

    def __init__(
        self,
        mapping: RelayMapping = None,
        *,
        target: Any = None,
        wildcard: str = DEFAULT_WILDCARD,
    ) -> None:
        """
        Initialize the relayer.

        Args:
            mapping: How events are forwarded (see module docs)
            target: Object events are forwarded to; may be omitted when
                the mapping is a function that does its own forwarding
            wildcard: Fallback key in dict mappings

        Raises:
            TypeError: If mapping is not one of the accepted forms
        """
        self.source: Any = None
        self.target = target
        self.wildcard = wildcard
        self.map: dict[str, Any] | None = None
        self._relay_fn: Callable[..., Any] | None = None

        if mapping is None:
            pass
        elif isinstance(mapping, str):
            self.map = {mapping: mapping}
        elif isinstance(mapping, Mapping):
            self.map = {}
            for event, rule in mapping.items():
                if rule is True and event != wildcard:
                    rule = event
                self.map[event] = rule
        elif callable(mapping):
            self._relay_fn = mapping
        elif isinstance(mapping, Iterable):
            self.map = {event: event for event in mapping}
        else:
            raise TypeError(
                f"Relay mapping must be a dict, a list of event names or a "
                f"callable, got {type(mapping).__name__}"
            )

    def __repr__(self) -> str:
        if self._relay_fn is not None:
            how = get_listener_name(self._relay_fn)
        elif self.map is not None:
            how = repr(self.map)
        else:
            how = "all"
        return f"{type(self).__name__}({how}, target={type(self.target).__name__})"

    def relay(self, event: str, args: Sequence[Any]) -> Any:
        if self._relay_fn is not None:
            return call_with_scope(self._relay_fn, self, (event, args))

        rules = self.map
        if rules is None:
            return self.forward(event, args)

        rule = rules[event] if event in rules else rules.get(self.wildcard)
        if not rule:
            return None

        if callable(rule):
            return call_with_scope(rule, self, (event, args))

        return self.forward(event if rule is True else rule, args)

    def forward(self, event: str, args: Sequence[Any]) -> Any:
        """
        Fire a mapped event on the target.

        Args:
            event: Event name after mapping
            args: Original positional arguments
        """
        if self.target is None:
            return None
        return self.target.fire(event, *args)


def relay_events(
    source: Any,
    target: Any,
    mapping: RelayMapping = None,
    *,
    wildcard: str = DEFAULT_WILDCARD,
) -> EventRelayer:
    """
    Attach a relay from a source to a target.

    Args:
        source: Watchable whose events are relayed
        target: Object to fire events on, or an ``EventRelayer`` to attach
            directly (``mapping`` is then ignored)
        mapping: How events are forwarded (see module docs)
        wildcard: Fallback key in dict mappings

    Returns:
        The attached relayer; close() it to stop relaying

    Raises:
        ValueError: If there is neither a target nor a mapping
        TypeError: If the target has no fire() method
    """
    if isinstance(target, EventRelayer):
        relayer = target
    else:
        if target is None and mapping is None:
            raise ValueError("relay_events() needs a target or a mapping")
        if target is not None and not isinstance(target, EventTarget):
            raise TypeError(f"Cannot relay events to {type(target).__name__}: it has no fire() method")
        relayer = Relayer(mapping, target=target, wildcard=wildcard)

    if relayer.source is not None and relayer.source is not source:
        relayer.close()

    relayer.source = source
    source._event_relayers, added = slot_add(
        source._event_relayers,
        relayer,
        lambda existing: existing is relayer,
    )

    if added:
        logger.debug(
            "Attached %r to %s",
            relayer,
            type(source).__name__,
            extra={
                "relayer": type(relayer).__name__,
                "source": type(source).__name__,
                "target": type(relayer.target).__name__,
            },
        )

    return relayer


def forward_to_relayers(source: Any, event: str, args: Sequence[Any]) -> Any:
    """
    Hand a fired event to every relayer attached to a source.

    Relayers attached or closed while this runs do not change which
    relayers this call visits.

    Returns:
        The last relayer's return value, or None
    """
    relayers = source._event_relayers
    result = None

    if relayers is None:
        return result

    if isinstance(relayers, ListenerList):
        with relayers.iterating() as items:
            for relayer in items:
                result = relayer.relay(event, args)
    else:
        result = relayers.relay(event, args)

    return result


__all__ = [
    "EventRelayer",
    "Relayer",
    "RelayMapping",
    "DEFAULT_WILDCARD",
    "relay_events",
    "forward_to_relayers",
]
