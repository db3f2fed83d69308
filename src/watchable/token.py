"""
Subscription tokens returned by manifest registration.

Registering a manifest (``host.on({"foo": f, "bar": g})``) returns a
``SubscriptionToken`` that remembers exactly the entries it created.
Destroying the token removes those entries and nothing else, even if the
slots holding them changed shape, were copied by a running dispatch, or
were merged into another host's registry by ``unify()``.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from watchable.entries import ListenerEntry

logger = logging.getLogger(__name__)


class SubscriptionToken:
    """
    Handle for a batch of listeners registered from one manifest.

    Tokens can be used as context managers; the listeners are removed when
    the block exits.

    Example:
        >>> token = button.on({"click": on_click, "hover": on_hover, "scope": view})
        >>> ...
        >>> token.destroy()

        >>> with button.on({"click": on_click}):
        ...     button.fire("click")

    Attributes:
        watchable: The host the listeners were registered on
        listeners: Entries created by the registration, each recording its
            event name in ``owner_event``
    """

    def __init__(self, watchable: Any) -> None:
        self.watchable = watchable
        self.listeners: list[ListenerEntry] = []

    def __repr__(self) -> str:
        events = [entry.owner_event for entry in self.listeners]
        return f"SubscriptionToken({type(self.watchable).__name__}, events={events!r})"

    def __len__(self) -> int:
        return len(self.listeners)

    def __enter__(self) -> SubscriptionToken:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.destroy()

    def add(self, entry: ListenerEntry) -> None:
        self.listeners.append(entry)

    def close(self) -> None:
        """Alias for destroy()."""
        self.destroy()

    def destroy(self) -> None:
        """
        Remove every listener this token created.

        Listeners already removed some other way are skipped. Calling
        destroy() more than once is harmless.
        """
        listeners, self.listeners = self.listeners, []
        removed = 0

        for entry in listeners:
            if self.watchable._discard_listener(entry):
                removed += 1

        logger.debug(
            "Destroyed subscription token, removed %d of %d listener(s)",
            removed,
            len(listeners),
            extra={
                "host": type(self.watchable).__name__,
                "removed": removed,
                "listener_count": len(listeners),
            },
        )


__all__ = ["SubscriptionToken"]
