"""
Tracing for event dispatch.

``fire()`` opens a ``watchable.fire`` span through the class's tracer,
tagged with the attribute names defined in ``attributes``. OpenTelemetry
is optional; without it every tracer created by ``create_tracer()`` is a
``NullTracer``.
"""

from watchable.observability.attributes import (
    ATTR_DISPATCH_STOPPED,
    ATTR_EVENT_NAME,
    ATTR_HOST_TYPE,
    ATTR_LISTENER_COUNT,
    ATTR_RELAY_COUNT,
)
from watchable.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    RecordedSpan,
    Tracer,
    create_tracer,
)
from watchable.observability.tracing import (
    OTEL_AVAILABLE,
    get_tracer,
    should_trace,
)

__all__ = [
    "OTEL_AVAILABLE",
    "get_tracer",
    "should_trace",
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "RecordedSpan",
    "MockTracer",
    "create_tracer",
    "ATTR_EVENT_NAME",
    "ATTR_HOST_TYPE",
    "ATTR_LISTENER_COUNT",
    "ATTR_RELAY_COUNT",
    "ATTR_DISPATCH_STOPPED",
]
