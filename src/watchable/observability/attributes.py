"""
Standard span attributes for watchable.

Attribute names used on dispatch spans, so traces from different hosts
can be filtered and aggregated consistently.

Example:
    >>> from watchable.observability.attributes import ATTR_EVENT_NAME
    >>>
    >>> with tracer.span("watchable.fire", {ATTR_EVENT_NAME: "change"}):
    ...     pass
"""

ATTR_EVENT_NAME = "watchable.event.name"
"""Name of the event being fired (string)."""

ATTR_HOST_TYPE = "watchable.host.type"
"""Class name of the object firing the event (string)."""

ATTR_LISTENER_COUNT = "watchable.listener.count"
"""Number of listeners registered when dispatch began (integer)."""

ATTR_RELAY_COUNT = "watchable.relay.count"
"""Number of relayers attached to the source when forwarding began (integer)."""

ATTR_DISPATCH_STOPPED = "watchable.dispatch.stopped"
"""Whether a listener returned STOP (boolean)."""


__all__ = [
    "ATTR_EVENT_NAME",
    "ATTR_HOST_TYPE",
    "ATTR_LISTENER_COUNT",
    "ATTR_RELAY_COUNT",
    "ATTR_DISPATCH_STOPPED",
]
