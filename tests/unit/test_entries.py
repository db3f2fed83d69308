"""
Unit tests for listener entries: kind selection, matching and invocation.
"""

from __future__ import annotations

import functools
from typing import Any

import pytest

from watchable import InvalidListenerError, ScopeResolutionError
from watchable.entries import (
    ListenerEntry,
    ListenerKind,
    call_with_scope,
    get_listener_name,
    invoke_entry,
    make_entry,
    matches,
    supports_scope_resolution,
)
from tests.fixtures import ResolvingHost, Scope, SubclassHost


def handler(*args: Any) -> tuple[Any, ...]:
    return args


class TestMakeEntry:
    """Tests for make_entry() kind selection and validation."""

    def test_callable_is_direct(self) -> None:
        entry = make_entry(SubclassHost(), "foo", handler)
        assert entry.kind is ListenerKind.DIRECT
        assert entry.scope is None
        assert entry.needs_resolution is False

    def test_callable_with_scope_is_direct(self) -> None:
        scope = Scope("s")
        entry = make_entry(SubclassHost(), "foo", handler, scope)
        assert entry.kind is ListenerKind.DIRECT
        assert entry.scope is scope

    def test_name_with_scope_is_named(self) -> None:
        entry = make_entry(SubclassHost(), "foo", "on_foo", Scope("s"))
        assert entry.kind is ListenerKind.NAMED

    def test_name_without_scope_needs_resolution(self) -> None:
        entry = make_entry(ResolvingHost(), "foo", "on_foo")
        assert entry.kind is ListenerKind.NAMED_RESOLVED
        assert entry.needs_resolution is True

    @pytest.mark.parametrize("callback", [handler, "on_foo"])
    def test_string_scope_needs_resolution(self, callback: Any) -> None:
        entry = make_entry(ResolvingHost(), "foo", callback, "view")
        assert entry.kind is ListenerKind.NAMED_RESOLVED

    @pytest.mark.parametrize(
        ("callback", "scope"),
        [("on_foo", None), (handler, "view"), ("on_foo", "view")],
    )
    def test_resolution_without_resolver(self, callback: Any, scope: Any) -> None:
        with pytest.raises(ScopeResolutionError, match="does not support scope resolution"):
            make_entry(SubclassHost(), "foo", callback, scope)

    @pytest.mark.parametrize("callback", [None, 42, object(), ["on_foo"]])
    def test_invalid_callback(self, callback: Any) -> None:
        with pytest.raises(InvalidListenerError):
            make_entry(SubclassHost(), "foo", callback)

    def test_records_owner_event(self) -> None:
        entry = make_entry(SubclassHost(), "foo", handler, owner_event="foo")
        assert entry.owner_event == "foo"


class TestSupportsScopeResolution:
    """Tests for supports_scope_resolution()."""

    def test_resolver_host(self) -> None:
        assert supports_scope_resolution(ResolvingHost()) is True

    def test_plain_host(self) -> None:
        assert supports_scope_resolution(SubclassHost()) is False

    def test_non_callable_attribute(self) -> None:
        host = SubclassHost()
        host.resolve_listener_scope = "nope"  # type: ignore[attr-defined]
        assert supports_scope_resolution(host) is False


class TestMatches:
    """Tests for matches()."""

    def test_entries_compare_by_identity(self) -> None:
        first = ListenerEntry(callback=handler)
        second = ListenerEntry(callback=handler)
        assert first != second
        assert first == first

    def test_same_callback_and_scope(self) -> None:
        scope = Scope("s")
        entry = ListenerEntry(callback=handler, scope=scope)
        assert matches(entry, handler, scope) is True

    def test_different_scope(self) -> None:
        entry = ListenerEntry(callback=handler, scope=Scope("s"))
        assert matches(entry, handler, Scope("s")) is False
        assert matches(entry, handler) is False

    def test_string_scope_compared_by_value(self) -> None:
        key = "".join(["vi", "ew"])
        entry = ListenerEntry(callback="on_foo", scope=key, kind=ListenerKind.NAMED_RESOLVED)
        assert matches(entry, "on_foo", "view") is True

    def test_looks_through_once_wrapper(self) -> None:
        entry = ListenerEntry(callback=lambda *a: None, original=handler)
        assert matches(entry, handler) is True
        assert entry.unwrapped is handler

    def test_bound_methods(self) -> None:
        scope = Scope("s")
        entry = ListenerEntry(callback=scope.on_foo)
        assert matches(entry, scope.on_foo) is True
        assert matches(entry, Scope("s").on_foo) is False


class TestInvoke:
    """Tests for invoke_entry() and call_with_scope()."""

    def test_direct_without_scope(self) -> None:
        entry = make_entry(SubclassHost(), "foo", handler)
        assert invoke_entry(SubclassHost(), entry, (1, 2)) == (1, 2)

    def test_direct_function_bound_to_scope(self) -> None:
        scope = Scope("s")
        entry = make_entry(SubclassHost(), "foo", handler, scope)
        assert invoke_entry(SubclassHost(), entry, (1,)) == (scope, 1)

    def test_named_on_scope(self) -> None:
        scope = Scope("s")
        entry = make_entry(SubclassHost(), "foo", "on_bar", scope)

        invoke_entry(SubclassHost(), entry, (1,))

        assert scope.calls == [("s", "on_bar", (1,))]

    def test_named_resolved(self) -> None:
        view = Scope("view")
        host = ResolvingHost({"view": view})
        entry = make_entry(host, "foo", "on_foo", "view")

        invoke_entry(host, entry, (7,))

        assert view.calls == [("view", "on_foo", (7,))]
        assert host.resolved == [("view", "on_foo")]

    def test_named_resolved_without_scope(self) -> None:
        view = Scope("view")
        host = ResolvingHost({None: view})
        entry = make_entry(host, "foo", "on_foo")

        invoke_entry(host, entry, ())

        assert view.calls == [("view", "on_foo", ())]

    def test_callable_resolved_against_key(self) -> None:
        view = Scope("view")
        host = ResolvingHost({"view": view})
        entry = make_entry(host, "foo", handler, "view")

        assert invoke_entry(host, entry, (3,)) == (view, 3)

    def test_resolution_happens_at_fire_time(self) -> None:
        host = ResolvingHost({"view": Scope("old")})
        entry = make_entry(host, "foo", "on_foo", "view")
        new = Scope("new")
        host.scopes["view"] = new

        invoke_entry(host, entry, ())

        assert new.calls == [("new", "on_foo", ())]

    def test_callable_objects_not_bound(self) -> None:
        partial = functools.partial(handler, "p")
        assert call_with_scope(partial, Scope("s"), (1,)) == ("p", 1)

    def test_builtin_not_bound(self) -> None:
        assert call_with_scope(len, Scope("s"), ([1, 2],)) == 2


class TestListenerName:
    """Tests for get_listener_name()."""

    def test_function(self) -> None:
        assert get_listener_name(handler) == "handler"

    def test_method_name(self) -> None:
        assert get_listener_name("on_foo") == "on_foo"

    def test_bound_method(self) -> None:
        assert get_listener_name(Scope("s").on_foo) == "Scope.on_foo"

    def test_partial_falls_back_to_type(self) -> None:
        assert get_listener_name(functools.partial(handler)) == "partial"

    def test_entry_name_looks_through_wrapper(self) -> None:
        entry = ListenerEntry(callback=lambda: None, original=handler)
        assert entry.name == "handler"
