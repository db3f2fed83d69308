"""
Tracers used around event dispatch.

Watchable classes hold a tracer in their ``event_tracer`` attribute and
only ever talk to it through the ``Tracer`` protocol, so tracing can be
switched per class without touching dispatch code.

Example:
    >>> from watchable.observability import create_tracer
    >>>
    >>> @watchable(tracer=create_tracer(__name__))
    ... class Document:
    ...     pass
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from opentelemetry.trace import Span

from watchable.observability.tracing import get_tracer, should_trace


@runtime_checkable
class Tracer(Protocol):
    """
    What dispatch needs from a tracer.

    ``span()`` returns a context manager yielding an object with
    ``set_attribute(key, value)``, or None when nothing is recorded.
    """

    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> AbstractContextManager[Any]: ...

    @property
    def enabled(self) -> bool:
        """False lets fire() skip building span attributes altogether."""
        ...


class NullTracer:
    """Tracer that records nothing. The default for every watchable class."""

    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> AbstractContextManager[None]:
        return contextlib.nullcontext()

    @property
    def enabled(self) -> bool:
        return False


class OpenTelemetryTracer:
    """
    Tracer backed by an OpenTelemetry tracer from the global provider.

    Args:
        tracer_name: Instrumentation scope name, usually a module name

    Raises:
        ImportError: If opentelemetry-api is not installed
    """

    def __init__(self, tracer_name: str) -> None:
        tracer = get_tracer(tracer_name)
        if tracer is None:
            raise ImportError("OpenTelemetryTracer requires the opentelemetry-api package")
        self._tracer = tracer

    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> AbstractContextManager[Span]:
        return self._tracer.start_as_current_span(name, attributes=attributes or {})

    @property
    def enabled(self) -> bool:
        return True


@dataclass
class RecordedSpan:
    """A span captured by MockTracer."""

    name: str
    attributes: dict[str, Any] = field(default_factory=dict)

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value


class MockTracer:
    """
    Tracer that keeps every span in memory, for assertions in tests.

    Spans are recorded when they open, so nested dispatches appear in the
    order they started.

    Example:
        >>> tracer = MockTracer()
        >>> emitter = EventEmitter(tracer=tracer)
        >>> emitter.fire("change")
        >>> tracer.span_names
        ['watchable.fire']
        >>> tracer.spans[0].attributes["watchable.dispatch.stopped"]
        False
    """

    def __init__(self) -> None:
        self.spans: list[RecordedSpan] = []

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> Iterator[RecordedSpan]:
        recorded = RecordedSpan(name, dict(attributes or {}))
        self.spans.append(recorded)
        yield recorded

    @property
    def enabled(self) -> bool:
        return True

    @property
    def span_names(self) -> list[str]:
        return [recorded.name for recorded in self.spans]

    def clear(self) -> None:
        self.spans.clear()


def create_tracer(name: str, enable_tracing: bool = True) -> Tracer:
    """
    Pick a tracer for a watchable class.

    Args:
        name: Instrumentation scope name, usually the class's module
        enable_tracing: Whether tracing was asked for

    Returns:
        An OpenTelemetryTracer when tracing was asked for and OpenTelemetry
        is importable, a NullTracer otherwise
    """
    if should_trace(enable_tracing):
        return OpenTelemetryTracer(name)
    return NullTracer()


__all__ = [
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "RecordedSpan",
    "MockTracer",
    "create_tracer",
]
