"""Library exceptions for the watchable package."""


class WatchableError(Exception):
    """Base exception for watchable library."""

    pass


class ScopeResolutionError(WatchableError, TypeError):
    """
    Raised when a listener needs scope resolution the host cannot provide.

    A listener given as a method name without a scope object, or any
    listener registered with a string scope, is resolved at fire time by
    the host's ``resolve_listener_scope()`` hook. Registering one on a host
    without that hook fails immediately rather than on the first fire.

    Attributes:
        host_type: Name of the host class
        event: Event name the listener was registered for
    """

    def __init__(self, host_type: str, event: str) -> None:
        self.host_type = host_type
        self.event = event
        super().__init__(
            f"Watchable instance does not support scope resolution "
            f"({host_type} has no resolve_listener_scope(), event {event!r})"
        )


class InvalidListenerError(WatchableError, TypeError):
    """Raised when a listener is neither callable nor a method name."""

    def __init__(self, event: str, listener: object) -> None:
        self.event = event
        self.listener = listener
        super().__init__(
            f"Listener for {event!r} must be callable or a method name, "
            f"got {type(listener).__name__}"
        )


class NotWatchableError(WatchableError, TypeError):
    """Raised when an operation needs a watchable object and got something else."""

    def __init__(self, obj: object) -> None:
        self.obj = obj
        super().__init__(f"{type(obj).__name__} instance is not watchable")
