"""
Optional OpenTelemetry support.

OpenTelemetry is an extra (``pip install watchable-py[telemetry]``); this
is the only module that imports it, and everything else asks here whether
it is present.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

try:
    from opentelemetry import trace

    OTEL_AVAILABLE = True
except ImportError:
    OTEL_AVAILABLE = False
    trace = None  # type: ignore[assignment]


def get_tracer(name: str) -> Tracer | None:
    """Return an OpenTelemetry tracer named ``name``, or None without OpenTelemetry."""
    if not OTEL_AVAILABLE or trace is None:
        return None
    return trace.get_tracer(name)


def should_trace(enable_tracing: bool) -> bool:
    """Tracing happens only when asked for and OpenTelemetry is importable."""
    return enable_tracing and OTEL_AVAILABLE


__all__ = [
    "OTEL_AVAILABLE",
    "get_tracer",
    "should_trace",
]
