"""
Listener registry: the per-host map from event name to listener slot.

A registry is created the first time anything subscribes to a host and
lives as long as the host. ``unify()`` is the only thing that replaces a
host's registry, and it does so by sharing another host's registry object.

Slots are stored in the shapes described in ``watchable.slots``. An event
with no listeners has no key at all; assigning ``None`` deletes the key.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from watchable.entries import ListenerEntry
from watchable.slots import ListenerList, slot_items, slot_size


class ListenerRegistry:
    """
    Mapping of event name to listener slot.

    Example:
        >>> registry = ListenerRegistry()
        >>> registry["change"] = entry
        >>> "change" in registry
        True
        >>> registry["change"] = None
        >>> "change" in registry
        False
    """

    __slots__ = ("_slots",)

    def __init__(self) -> None:
        self._slots: dict[str, ListenerEntry | ListenerList[ListenerEntry]] = {}

    def __getitem__(self, event: str) -> Any:
        return self._slots.get(event)

    def __setitem__(self, event: str, slot: Any) -> None:
        if slot is None:
            self._slots.pop(event, None)
        else:
            self._slots[event] = slot

    def __contains__(self, event: object) -> bool:
        return event in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._slots))

    def __len__(self) -> int:
        return len(self._slots)

    def __bool__(self) -> bool:
        # An empty registry is still a registry
        return True

    def __repr__(self) -> str:
        counts = {event: slot_size(slot) for event, slot in self._slots.items()}
        return f"ListenerRegistry({counts!r})"

    def events(self) -> list[str]:
        """Get the names of all events that currently have listeners."""
        return list(self._slots)

    def entries(self, event: str) -> list[ListenerEntry]:
        """Get the listener entries for an event, in dispatch order."""
        return slot_items(self._slots.get(event))

    def listener_count(self, event: str | None = None) -> int:
        """
        Get the number of registered listeners.

        Args:
            event: If provided, count listeners for this event only

        Returns:
            Number of listener entries
        """
        if event is None:
            return sum(slot_size(slot) for slot in self._slots.values())
        return slot_size(self._slots.get(event))

    def clear(self) -> None:
        self._slots.clear()


__all__ = ["ListenerRegistry"]
