"""
Configuration for watchable hosts.

This module provides:
- WatchableConfig: Per-class settings read by the dispatch machinery
- DEFAULT_CONFIG: The configuration used when a class sets none
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WatchableConfig:
    """
    Configuration for a watchable class.

    Attributes:
        manifest_scope_key: Manifest key holding the shared scope rather
            than an event name, as in ``on({"foo": f, "scope": obj})``
        relay_wildcard: Relay map key used for events with no entry of
            their own
        enable_tracing: Create an OpenTelemetry tracer for hosts built by
            ``apply_to()`` / ``EventEmitter`` when no tracer is given

    Example:
        >>> config = WatchableConfig(manifest_scope_key="this")
        >>>
        >>> @watchable(config=config)
        ... class Button:
        ...     pass
        >>>
        >>> Button().on({"click": handler, "this": view})
    """

    manifest_scope_key: str = "scope"
    relay_wildcard: str = "*"
    enable_tracing: bool = False

    def __post_init__(self) -> None:
        if not self.manifest_scope_key:
            raise ValueError("manifest_scope_key must not be empty")
        if not self.relay_wildcard:
            raise ValueError("relay_wildcard must not be empty")


DEFAULT_CONFIG = WatchableConfig()


__all__ = ["WatchableConfig", "DEFAULT_CONFIG"]
