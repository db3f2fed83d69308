"""
Unit tests for ListenerRegistry.
"""

from __future__ import annotations

from watchable import ListenerEntry, ListenerRegistry
from watchable.slots import ListenerList


def make(label: str) -> ListenerEntry:
    return ListenerEntry(callback=lambda: label)


class TestListenerRegistry:
    """Tests for the event name to slot mapping."""

    def test_missing_event_is_none(self) -> None:
        registry = ListenerRegistry()
        assert registry["foo"] is None
        assert "foo" not in registry
        assert len(registry) == 0

    def test_empty_registry_is_truthy(self) -> None:
        assert bool(ListenerRegistry()) is True

    def test_set_and_get(self) -> None:
        registry = ListenerRegistry()
        entry = make("a")
        registry["foo"] = entry

        assert registry["foo"] is entry
        assert "foo" in registry
        assert registry.events() == ["foo"]

    def test_setting_none_deletes_key(self) -> None:
        registry = ListenerRegistry()
        registry["foo"] = make("a")
        registry["foo"] = None

        assert "foo" not in registry
        assert registry.events() == []

    def test_setting_none_for_missing_key(self) -> None:
        registry = ListenerRegistry()
        registry["foo"] = None
        assert len(registry) == 0

    def test_entries_and_counts(self) -> None:
        registry = ListenerRegistry()
        a, b, c = make("a"), make("b"), make("c")
        registry["foo"] = ListenerList([a, b])
        registry["bar"] = c

        assert registry.entries("foo") == [a, b]
        assert registry.entries("bar") == [c]
        assert registry.entries("baz") == []
        assert registry.listener_count("foo") == 2
        assert registry.listener_count("baz") == 0
        assert registry.listener_count() == 3

    def test_iteration_survives_mutation(self) -> None:
        registry = ListenerRegistry()
        registry["foo"] = make("a")
        registry["bar"] = make("b")

        for event in registry:
            registry[event] = None

        assert len(registry) == 0

    def test_clear(self) -> None:
        registry = ListenerRegistry()
        registry["foo"] = make("a")
        registry.clear()
        assert registry.events() == []

    def test_repr_shows_counts(self) -> None:
        registry = ListenerRegistry()
        registry["foo"] = ListenerList([make("a"), make("b")])
        assert repr(registry) == "ListenerRegistry({'foo': 2})"
