"""
Listener slots with copy-on-write semantics.

A slot is the storage cell for one event's listeners (or one source's
relayers). It takes one of three shapes:

- ``None``: nothing registered
- a bare item: exactly one registered, stored without a container
- a ``ListenerList``: two or more, in registration order

A ``ListenerList`` counts the dispatch loops currently iterating it. While
that count is non-zero the list is never mutated; the mutating helpers in
this module work on a fresh copy instead and hand it back for the caller
to install in place of the original. The in-flight loops keep iterating
the original, unchanged.

All helpers return the new slot value; callers always store it back.

Example:
    >>> slot = slot_add(None, a)[0]        # single
    >>> slot = slot_add(slot, b)[0]        # ListenerList([a, b])
    >>> with slot.iterating() as items:
    ...     slot2, _ = slot_remove(slot, lambda x: x is a)
    ...     assert slot2 is not slot       # copied, original untouched
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Generator, Iterable, Iterator
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ListenerList(Generic[T]):
    """
    Ordered multi-entry slot carrying an iteration depth.

    Attributes:
        items: Entries in registration order
        firing: Number of dispatch loops currently iterating ``items``
    """

    __slots__ = ("items", "firing")

    def __init__(self, items: Iterable[T] = ()) -> None:
        self.items: list[T] = list(items)
        self.firing = 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __repr__(self) -> str:
        return f"ListenerList({self.items!r}, firing={self.firing})"

    def copy(self) -> ListenerList[T]:
        """Return a shallow copy with a zero iteration depth."""
        return ListenerList(self.items)

    def writable(self) -> ListenerList[T]:
        """Return self if nothing is iterating it, else a fresh copy."""
        return self.copy() if self.firing else self

    @contextlib.contextmanager
    def iterating(self) -> Generator[list[T], None, None]:
        """
        Mark the list as being iterated for the duration of the block.

        The depth is restored even if the block raises.
        """
        self.firing += 1
        try:
            yield self.items
        finally:
            self.firing -= 1


def slot_items(slot: Any) -> list[Any]:
    """Return the items of a slot as a list (empty for an empty slot)."""
    if slot is None:
        return []
    if isinstance(slot, ListenerList):
        return list(slot.items)
    return [slot]


def slot_size(slot: Any) -> int:
    """Return the number of items in a slot."""
    if slot is None:
        return 0
    if isinstance(slot, ListenerList):
        return len(slot.items)
    return 1


def slot_find(slot: Any, predicate: Callable[[Any], bool]) -> Any | None:
    """Return the first item matching predicate, or None."""
    if slot is None:
        return None
    if isinstance(slot, ListenerList):
        for item in slot.items:
            if predicate(item):
                return item
        return None
    return slot if predicate(slot) else None


def slot_add(
    slot: Any,
    item: Any,
    is_duplicate: Callable[[Any], bool] | None = None,
) -> tuple[Any, bool]:
    """
    Append an item to a slot.

    Args:
        slot: Current slot value
        item: Item to append
        is_duplicate: Predicate identifying an existing item equivalent to
            ``item``; when one matches nothing is added

    Returns:
        Tuple of (new slot value, whether the item was added)
    """
    if slot is None:
        return item, True

    if is_duplicate is not None and slot_find(slot, is_duplicate) is not None:
        return slot, False

    if isinstance(slot, ListenerList):
        slot = slot.writable()
        slot.items.append(item)
        return slot, True

    return ListenerList([slot, item]), True


def slot_remove(slot: Any, predicate: Callable[[Any], bool]) -> tuple[Any, Any | None]:
    """
    Remove the first item matching predicate.

    A list left with one item collapses to that bare item; a slot left with
    nothing becomes None.

    Returns:
        Tuple of (new slot value, removed item or None)
    """
    if slot is None:
        return None, None

    if not isinstance(slot, ListenerList):
        if predicate(slot):
            return None, slot
        return slot, None

    for index, item in enumerate(slot.items):
        if predicate(item):
            break
    else:
        return slot, None

    if len(slot.items) == 1:
        return None, item
    if len(slot.items) == 2:
        # Collapse without touching the list; a running dispatch may hold it
        return slot.items[1 - index], item

    slot = slot.writable()
    del slot.items[index]
    return slot, item


def slot_discard(slot: Any, item: Any) -> tuple[Any, bool]:
    """Remove exactly ``item`` (by identity) from a slot."""
    slot, removed = slot_remove(slot, lambda candidate: candidate is item)
    return slot, removed is not None


def slot_merge(first: Any, second: Any) -> Any:
    """
    Combine two slots, ``first``'s items before ``second``'s.

    When both are non-empty the result is always a new ``ListenerList``
    with a zero depth, whatever shape either side had.
    """
    if first is None:
        return second
    if second is None:
        return first
    return ListenerList(slot_items(first) + slot_items(second))


__all__ = [
    "ListenerList",
    "slot_items",
    "slot_size",
    "slot_find",
    "slot_add",
    "slot_remove",
    "slot_discard",
    "slot_merge",
]
