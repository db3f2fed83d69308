"""
Watchable: make any object an event source.

Listeners register against named events; the host fires events
synchronously and listeners run in registration order. A listener that
returns ``STOP`` ends the current dispatch pass. Events that were not
stopped are then handed to any relayers attached to the host.

Listeners may freely subscribe, unsubscribe, fire, or unify from inside a
dispatch. A dispatch always visits exactly the listeners that were
registered when it began: listeners removed mid-dispatch still run in
that pass, listeners added mid-dispatch first run on the next fire.

There are three ways to get the behavior:

    >>> class Document(Watchable):
    ...     pass

    >>> @watchable
    ... class Document:
    ...     pass

    >>> class Document:
    ...     pass
    >>> apply_to(Document)

Example:
    >>> doc = Document()
    >>> doc.on("save", on_save)
    >>> token = doc.on({"change": "on_change", "close": "on_close", "scope": view})
    >>> doc.fire("save", path)
    >>> token.destroy()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import Any, Literal, TypeVar, overload

from watchable.config import DEFAULT_CONFIG, WatchableConfig
from watchable.entries import (
    ListenerEntry,
    invoke_entry,
    make_entry,
    matches,
)
from watchable.exceptions import NotWatchableError
from watchable.observability import (
    ATTR_DISPATCH_STOPPED,
    ATTR_EVENT_NAME,
    ATTR_HOST_TYPE,
    ATTR_LISTENER_COUNT,
    ATTR_RELAY_COUNT,
    NullTracer,
    Tracer,
    create_tracer,
)
from watchable.registry import ListenerRegistry
from watchable.relay import EventRelayer, RelayMapping, forward_to_relayers
from watchable.relay import relay_events as attach_relay
from watchable.slots import (
    ListenerList,
    slot_add,
    slot_discard,
    slot_remove,
    slot_size,
)
from watchable.token import SubscriptionToken

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)


class _Stop(Enum):
    STOP = "stop"

    def __repr__(self) -> str:
        return "STOP"


STOP: Literal[_Stop.STOP] = _Stop.STOP
"""Return this from a listener to skip the remaining listeners and relays."""


class Watchable:
    """
    Mixin giving a class listener registration and synchronous dispatch.

    Instances carry no state until something subscribes; the listener
    registry is created on first use.

    Optional hooks a subclass may define:
        resolve_listener_scope(scope, callback, entry): Supply the object a
            listener is called against when it was registered by method
            name without a scope object, or with a string scope key
        on_event_watch(event): Called when an event gains its first listener
        on_event_unwatch(event): Called when an event loses its last listener

    Class attributes:
        watchable_config: WatchableConfig for the class
        event_tracer: Tracer used around fire() (NullTracer by default)

    Example:
        >>> class Store(Watchable):
        ...     def add(self, item):
        ...         self.items.append(item)
        ...         self.fire("add", item)
        >>>
        >>> store = Store()
        >>> store.on("add", lambda item: print("added", item))
    """

    _event_registry: ListenerRegistry | None = None
    _event_relayers: Any = None

    watchable_config: WatchableConfig = DEFAULT_CONFIG
    event_tracer: Tracer = NullTracer()

    # =========================================================================
    # Dispatch
    # =========================================================================

    def fire(self, event: str, *args: Any) -> Any:
        """
        Dispatch an event to its listeners, then to attached relayers.

        Args:
            event: Event name
            *args: Positional arguments passed unchanged to every listener

        Returns:
            STOP if a listener returned STOP, otherwise the last relayer's
            result (None when there are no relayers)

        Raises:
            Exception: Whatever a listener raises; later listeners in this
                pass are skipped
        """
        tracer = self.event_tracer
        if not tracer.enabled:
            return self._dispatch(event, args)

        registry = self._event_registry
        attributes = {
            ATTR_EVENT_NAME: event,
            ATTR_HOST_TYPE: type(self).__name__,
            ATTR_LISTENER_COUNT: registry.listener_count(event) if registry is not None else 0,
            ATTR_RELAY_COUNT: slot_size(self._event_relayers),
        }
        with tracer.span("watchable.fire", attributes) as span:
            result = self._dispatch(event, args)
            if span is not None:
                span.set_attribute(ATTR_DISPATCH_STOPPED, result is STOP)
        return result

    def emit(self, event: str, *args: Any) -> Any:
        """Alias for fire()."""
        return self.fire(event, *args)

    def _dispatch(self, event: str, args: Sequence[Any]) -> Any:
        registry = self._event_registry
        slot = registry[event] if registry is not None else None

        if isinstance(slot, ListenerList):
            with slot.iterating() as entries:
                for entry in entries:
                    if invoke_entry(self, entry, args) is STOP:
                        return STOP
        elif slot is not None:
            if invoke_entry(self, slot, args) is STOP:
                return STOP

        return forward_to_relayers(self, event, args)

    # =========================================================================
    # Subscription
    # =========================================================================

    @overload
    def on(self, event: str, callback: Any, scope: Any = None) -> None: ...

    @overload
    def on(self, event: Mapping[str, Any], callback: None = None, scope: Any = None) -> SubscriptionToken: ...

    def on(self, event: Any, callback: Any = None, scope: Any = None) -> SubscriptionToken | None:
        """
        Register a listener, or a manifest of listeners.

        Registering the same (callback, scope) pair twice for one event has
        no effect.

        Args:
            event: Event name, or a manifest mapping event names to
                callbacks/method names. The manifest key named by
                ``watchable_config.manifest_scope_key`` ("scope") holds the
                scope shared by all its listeners
            callback: Callable, or the name of a method on scope
            scope: Object the listener is called against

        Returns:
            A SubscriptionToken for manifests, None otherwise

        Raises:
            ScopeResolutionError: If the listener needs
                resolve_listener_scope() and the class has none
            InvalidListenerError: If callback is not callable or a string
        """
        return self._subscribe(event, callback, scope, once=False)

    @overload
    def once(self, event: str, callback: Any, scope: Any = None) -> None: ...

    @overload
    def once(self, event: Mapping[str, Any], callback: None = None, scope: Any = None) -> SubscriptionToken: ...

    def once(self, event: Any, callback: Any = None, scope: Any = None) -> SubscriptionToken | None:
        """
        Register a listener that removes itself the first time it runs.

        The listener can still be removed beforehand with
        ``un(event, callback, scope)``. Accepts the same arguments as on().
        It runs at most once even when an earlier listener re-fires the
        same event.
        """
        return self._subscribe(event, callback, scope, once=True)

    def un(self, event: Any, callback: Any = None, scope: Any = None) -> None:
        """
        Remove a listener, or each listener named in a manifest.

        Removing a listener that is not registered does nothing.

        Args:
            event: Event name or manifest (see on())
            callback: Callback or method name given to on()
            scope: Scope given to on()
        """
        if self._event_registry is None:
            return

        if isinstance(event, str):
            self._remove_listener(event, callback, scope)
            return

        manifest, scope = self._split_manifest(event, scope)
        for name, listener in manifest.items():
            self._remove_listener(name, listener, scope)

    def off(self, event: Any, callback: Any = None, scope: Any = None) -> None:
        """Alias for un()."""
        self.un(event, callback, scope)

    def has_listeners(self, event: str) -> bool:
        """Check if any listener is registered for an event."""
        registry = self._event_registry
        return registry is not None and event in registry

    def listener_count(self, event: str | None = None) -> int:
        """
        Get the number of registered listeners.

        Args:
            event: If provided, count listeners for this event only
        """
        registry = self._event_registry
        if registry is None:
            return 0
        return registry.listener_count(event)

    def un_all(self, event: str | None = None) -> None:
        """
        Remove every listener for one event, or for all events.

        A dispatch already in progress still reaches the listeners it
        started with.

        Args:
            event: Event to clear; None clears all events
        """
        registry = self._event_registry
        if registry is None:
            return

        if event is None:
            events = registry.events()
        else:
            events = [event] if event in registry else []

        for name in events:
            registry[name] = None
            self._notify_unwatch(name)

        if events:
            logger.debug(
                "Removed all listeners for %d event(s) on %s",
                len(events),
                type(self).__name__,
                extra={"host": type(self).__name__, "events": events},
            )

    # =========================================================================
    # Relaying
    # =========================================================================

    def relay_events(self, target: Any, mapping: RelayMapping = None) -> EventRelayer:
        """
        Forward events fired on this object to a target.

        Args:
            target: Object with fire(), or an EventRelayer to attach as-is
            mapping: Which events to forward and how (see watchable.relay)

        Returns:
            The attached relayer; close() it to stop relaying
        """
        return attach_relay(
            self,
            target,
            mapping,
            wildcard=self.watchable_config.relay_wildcard,
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _split_manifest(self, manifest: Any, scope: Any) -> tuple[dict[str, Any], Any]:
        if not isinstance(manifest, Mapping):
            raise TypeError(
                f"Event must be a name or a mapping of names to listeners, "
                f"got {type(manifest).__name__}"
            )
        scope_key = self.watchable_config.manifest_scope_key
        scope = manifest.get(scope_key, scope)
        listeners = {name: fn for name, fn in manifest.items() if name != scope_key}
        return listeners, scope

    def _subscribe(self, event: Any, callback: Any, scope: Any, *, once: bool) -> SubscriptionToken | None:
        if isinstance(event, str):
            entry = self._build_entry(event, callback, scope, once=once)
            self._insert_entry(event, entry)
            return None

        manifest, scope = self._split_manifest(event, scope)

        # Build everything first so a bad listener registers nothing
        entries = [
            (name, self._build_entry(name, listener, scope, once=once, owned=True))
            for name, listener in manifest.items()
        ]

        token = SubscriptionToken(self)
        for name, entry in entries:
            if self._insert_entry(name, entry):
                token.add(entry)
        return token

    def _build_entry(
        self,
        event: str,
        callback: Any,
        scope: Any,
        *,
        once: bool = False,
        owned: bool = False,
    ) -> ListenerEntry:
        owner_event = event if owned else None
        entry = make_entry(self, event, callback, scope, owner_event=owner_event)
        if not once:
            return entry

        fired = False

        def once_listener(*args: Any) -> Any:
            nonlocal fired
            # A pass that began before a nested fire removed us still holds us
            if fired:
                return None
            fired = True
            self.un(event, callback, scope)
            return invoke_entry(self, entry, args)

        return ListenerEntry(
            callback=once_listener,
            scope=scope,
            kind=entry.kind,
            original=callback,
            owner_event=owner_event,
        )

    def _insert_entry(self, event: str, entry: ListenerEntry) -> bool:
        registry = self._event_registry
        if registry is None:
            registry = self._event_registry = ListenerRegistry()

        slot = registry[event]
        new_slot, added = slot_add(
            slot,
            entry,
            lambda existing: matches(existing, entry.unwrapped, entry.scope),
        )
        if not added:
            return False

        registry[event] = new_slot
        logger.debug(
            "Registered listener %s for %s on %s",
            entry.name,
            event,
            type(self).__name__,
            extra={
                "host": type(self).__name__,
                "event": event,
                "listener": entry.name,
                "kind": entry.kind.value,
                "once": entry.original is not None,
            },
        )

        if slot is None:
            self._notify_watch(event)
        return True

    def _remove_listener(self, event: str, callback: Any, scope: Any) -> bool:
        registry = self._event_registry
        if registry is None:
            return False

        slot = registry[event]
        new_slot, removed = slot_remove(slot, lambda entry: matches(entry, callback, scope))
        if removed is None:
            return False

        registry[event] = new_slot
        logger.debug(
            "Removed listener %s for %s on %s",
            removed.name,
            event,
            type(self).__name__,
            extra={"host": type(self).__name__, "event": event, "listener": removed.name},
        )

        if new_slot is None:
            self._notify_unwatch(event)
        return True

    def _discard_listener(self, entry: ListenerEntry) -> bool:
        """Remove exactly this entry, wherever its owner event's slot now lives."""
        registry = self._event_registry
        event = entry.owner_event
        if registry is None or event is None:
            return False

        new_slot, removed = slot_discard(registry[event], entry)
        if not removed:
            return False

        registry[event] = new_slot
        if new_slot is None:
            self._notify_unwatch(event)
        return True

    def _notify_watch(self, event: str) -> None:
        hook = getattr(self, "on_event_watch", None)
        if hook is not None:
            hook(event)

    def _notify_unwatch(self, event: str) -> None:
        hook = getattr(self, "on_event_unwatch", None)
        if hook is not None:
            hook(event)


class EventEmitter(Watchable):
    """
    Ready-made watchable with hooks supplied at construction.

    Example:
        >>> emitter = EventEmitter(
        ...     on_watch=lambda event: backend.subscribe(event),
        ...     on_unwatch=lambda event: backend.unsubscribe(event),
        ... )
        >>> emitter.on("tick", handler)   # backend.subscribe("tick")
    """

    def __init__(
        self,
        *,
        resolve_scope: Callable[[Any, Any, ListenerEntry], Any] | None = None,
        on_watch: Callable[[str], None] | None = None,
        on_unwatch: Callable[[str], None] | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool | None = None,
    ) -> None:
        """
        Initialize the emitter.

        Args:
            resolve_scope: Called as resolve_scope(scope, callback, entry) to
                supply the object for scope-resolved listeners
            on_watch: Called with an event name when it gains its first listener
            on_unwatch: Called with an event name when it loses its last listener
            tracer: Optional custom Tracer instance
            enable_tracing: Create an OpenTelemetry tracer if available.
                Defaults to the class config; ignored if tracer is provided
        """
        if resolve_scope is not None:
            self.resolve_listener_scope = resolve_scope
        if on_watch is not None:
            self.on_event_watch = on_watch
        if on_unwatch is not None:
            self.on_event_unwatch = on_unwatch

        if enable_tracing is None:
            enable_tracing = self.watchable_config.enable_tracing
        if tracer is not None or enable_tracing:
            self.event_tracer = tracer or create_tracer(__name__, enable_tracing)


# =============================================================================
# Installing on existing classes
# =============================================================================

_INSTALLED = {
    name: value
    for name, value in vars(Watchable).items()
    if not (name.startswith("__") and name.endswith("__"))
}


def apply_to(
    cls: C,
    *,
    config: WatchableConfig | None = None,
    tracer: Tracer | None = None,
) -> C:
    """
    Install the Watchable operations on an existing class.

    Methods the class already defines are replaced. Instances start with
    no registry, exactly as Watchable subclasses do.

    Args:
        cls: Class to extend
        config: Configuration for the class (defaults to DEFAULT_CONFIG)
        tracer: Tracer for the class; when omitted, an OpenTelemetry tracer
            is created if config.enable_tracing is set

    Returns:
        The same class

    Raises:
        TypeError: If cls is not a class
    """
    if not isinstance(cls, type):
        raise TypeError(f"apply_to() needs a class, got {type(cls).__name__}")

    for name, value in _INSTALLED.items():
        setattr(cls, name, value)

    config = config or DEFAULT_CONFIG
    cls.watchable_config = config
    cls.event_tracer = tracer or create_tracer(cls.__module__, config.enable_tracing)

    logger.debug(
        "Installed watchable behavior on %s",
        cls.__qualname__,
        extra={"host": cls.__qualname__, "tracing": cls.event_tracer.enabled},
    )
    return cls


@overload
def watchable(cls: C) -> C: ...


@overload
def watchable(
    cls: None = None,
    *,
    config: WatchableConfig | None = None,
    tracer: Tracer | None = None,
) -> Callable[[C], C]: ...


def watchable(
    cls: Any = None,
    *,
    config: WatchableConfig | None = None,
    tracer: Tracer | None = None,
) -> Any:
    """
    Class decorator form of apply_to().

    Example:
        >>> @watchable
        ... class Model:
        ...     pass

        >>> @watchable(config=WatchableConfig(manifest_scope_key="this"))
        ... class View:
        ...     pass
    """

    def decorator(target: C) -> C:
        return apply_to(target, config=config, tracer=tracer)

    if cls is None:
        return decorator
    return decorator(cls)


# =============================================================================
# Module-level helpers
# =============================================================================


def is_watchable(obj: Any) -> bool:
    """Check if an object has Watchable behavior (by subclassing or apply_to)."""
    if isinstance(obj, Watchable):
        return True
    # apply_to() installs the very same function objects
    return getattr(type(obj), "_discard_listener", None) is Watchable._discard_listener


def has_listeners(obj: Any, event: str) -> bool:
    """
    Check if a watchable object has listeners for an event.

    Raises:
        NotWatchableError: If obj is not watchable
    """
    if not is_watchable(obj):
        raise NotWatchableError(obj)
    return Watchable.has_listeners(obj, event)


def un_all(obj: Any, event: str | None = None) -> None:
    """Remove every listener from a watchable object, or those for one event."""
    if not is_watchable(obj):
        raise NotWatchableError(obj)
    Watchable.un_all(obj, event)


def pipe(source: Any, target: Any) -> EventRelayer:
    """
    Relay every event fired on source to target.

    Raises:
        NotWatchableError: If source is not watchable
    """
    if not is_watchable(source):
        raise NotWatchableError(source)
    return source.relay_events(target)


__all__ = [
    "STOP",
    "Watchable",
    "EventEmitter",
    "apply_to",
    "watchable",
    "is_watchable",
    "has_listeners",
    "un_all",
    "pipe",
]
