"""
watchable - Synchronous event sources for any Python object.

This library provides:
- Watchable mixin, @watchable decorator and apply_to() for turning any
  class into an event source
- Ordered, de-duplicated listener registration by callable or method name,
  with one-shot listeners and batch registration through manifests
- Dispatch that stays consistent while listeners subscribe, unsubscribe or
  fire from inside a dispatch
- Relays for forwarding, renaming, filtering and transforming events
- unify() for permanently sharing listeners between two objects
- An event logging relay
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("watchable-py")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from watchable.config import DEFAULT_CONFIG, WatchableConfig
from watchable.core import (
    STOP,
    EventEmitter,
    Watchable,
    apply_to,
    has_listeners,
    is_watchable,
    pipe,
    un_all,
    watchable,
)
from watchable.entries import ListenerEntry, ListenerKind
from watchable.exceptions import (
    InvalidListenerError,
    NotWatchableError,
    ScopeResolutionError,
    WatchableError,
)
from watchable.log import EventLogConfig, EventLogger, log_events
from watchable.protocols import EventTarget, EventWatcher, ScopeResolver
from watchable.registry import ListenerRegistry
from watchable.relay import EventRelayer, Relayer, relay_events
from watchable.token import SubscriptionToken
from watchable.unify import unify

__all__ = [
    # Version
    "__version__",
    # Core
    "STOP",
    "Watchable",
    "EventEmitter",
    "apply_to",
    "watchable",
    "is_watchable",
    "has_listeners",
    "un_all",
    "pipe",
    # Listeners
    "ListenerEntry",
    "ListenerKind",
    "ListenerRegistry",
    "SubscriptionToken",
    # Relays
    "EventRelayer",
    "Relayer",
    "relay_events",
    "unify",
    # Logging relay
    "EventLogConfig",
    "EventLogger",
    "log_events",
    # Protocols
    "EventTarget",
    "EventWatcher",
    "ScopeResolver",
    # Configuration
    "WatchableConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "WatchableError",
    "ScopeResolutionError",
    "InvalidListenerError",
    "NotWatchableError",
]
