"""
Event logging relay.

``log_events(source)`` attaches an ``EventLogger`` that writes every event
the source fires to a ``logging.Logger`` (or appends it to a list, which is
handy in tests). Per-event log levels, argument masks and a name prefix are
configured through ``EventLogConfig``.

Example:
    >>> log_events(document, {"prefix": "doc.", "level": {"error": "ERROR"}})
    >>> document.fire("save", "/tmp/a.txt", 42)
    # INFO watchable.events: doc.save: "/tmp/a.txt", 42

    >>> lines = []
    >>> log_events(document, lines)
    >>> document.fire("save", "a")
    >>> lines
    ['save: "a"']

    >>> # Only log the second argument of "move"
    >>> log_events(document, {"mask": {"move": 0b10}})
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping, MutableSequence, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from watchable.relay import DEFAULT_WILDCARD, RelayMapping, Relayer, relay_events

EVENT_LOGGER_NAME = "watchable.events"

event_logger = logging.getLogger(EVENT_LOGGER_NAME)


def _coerce_level(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid log level: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        levels = logging.getLevelNamesMapping()
        name = value.upper()
        if name in levels:
            return levels[name]
    raise ValueError(f"Invalid log level: {value!r}")


class EventLogConfig(BaseModel):
    """
    Configuration for an EventLogger.

    Attributes:
        logger: Logger to write to, or its name; defaults to "watchable.events"
        to: List to append formatted lines to instead of logging
        level: Log level per event name (names like "DEBUG" or ints)
        default_level: Level for events not in ``level``
        mask: Bitmask selecting which positional arguments are logged,
            either one int for every event or a map of event name to int
            (with "*" as fallback). Bit i keeps argument i.
        prefix: Prepended to every logged event name
        formatter: Turns one argument into text; strings are JSON-quoted
            and everything else goes through str() by default. Given as
            ``format`` in option dicts

    Unknown options are rejected.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
        populate_by_name=True,
    )

    logger: logging.Logger | None = None
    to: Any = None
    level: dict[str, int] = Field(default_factory=dict)
    default_level: int = logging.INFO
    mask: dict[str, int] = Field(default_factory=dict)
    prefix: str = ""
    formatter: Callable[[Any], str] | None = Field(default=None, alias="format")

    @field_validator("logger", mode="before")
    @classmethod
    def _resolve_logger(cls, value: Any) -> Any:
        if isinstance(value, str):
            return logging.getLogger(value)
        return value

    @field_validator("to")
    @classmethod
    def _check_sink(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, MutableSequence):
            raise ValueError(f"'to' must be a list, got {type(value).__name__}")
        return value

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_levels(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {event: _coerce_level(level) for event, level in value.items()}
        return value

    @field_validator("default_level", mode="before")
    @classmethod
    def _coerce_default_level(cls, value: Any) -> int:
        return _coerce_level(value)

    @field_validator("mask", mode="before")
    @classmethod
    def _expand_mask(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return {DEFAULT_WILDCARD: value}
        return value


class EventLogger(Relayer):
    """
    Relayer that logs events instead of firing them on a target.

    Accepts the same mappings as Relayer, so it can log a subset of events
    or log them under different names.

    Attributes:
        config: The EventLogConfig in effect
    """

    def __init__(
        self,
        options: EventLogConfig | Mapping[str, Any] | MutableSequence[str] | logging.Logger | None = None,
        mapping: RelayMapping = None,
        *,
        wildcard: str = DEFAULT_WILDCARD,
    ) -> None:
        """
        Initialize the logger relay.

        Args:
            options: An EventLogConfig, a dict of its fields, a list to use
                as the ``to`` sink, or a Logger
            mapping: Which events to log and under what names
            wildcard: Fallback key in dict mappings

        Raises:
            pydantic.ValidationError: If options are invalid
        """
        super().__init__(mapping, wildcard=wildcard)
        self.config = self._build_config(options)

    @staticmethod
    def _build_config(options: Any) -> EventLogConfig:
        if options is None:
            return EventLogConfig()
        if isinstance(options, EventLogConfig):
            return options
        if isinstance(options, logging.Logger):
            return EventLogConfig(logger=options)
        if isinstance(options, MutableSequence):
            return EventLogConfig(to=options)
        return EventLogConfig.model_validate(dict(options))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(prefix={self.config.prefix!r})"

    def format(self, arg: Any) -> str:
        """Format one event argument."""
        if self.config.formatter is not None:
            return self.config.formatter(arg)
        if isinstance(arg, str):
            return json.dumps(arg)
        return str(arg)

    def select(self, event: str, args: Sequence[Any]) -> list[Any]:
        """Apply the configured argument mask for an event."""
        masks = self.config.mask
        mask = masks[event] if event in masks else masks.get(DEFAULT_WILDCARD)
        if mask is None:
            return list(args)
        return [arg for index, arg in enumerate(args) if mask & (1 << index)]

    def forward(self, event: str, args: Sequence[Any]) -> None:
        config = self.config
        name = f"{config.prefix}{event}"
        text = ", ".join(self.format(arg) for arg in self.select(event, args))

        if config.to is not None:
            config.to.append(f"{name}: {text}" if text else name)
            return

        level = config.level.get(event, config.default_level)
        out = config.logger or event_logger
        if text:
            out.log(level, "%s: %s", name, text, extra={"event": event})
        else:
            out.log(level, "%s", name, extra={"event": event})


def log_events(
    source: Any,
    options: EventLogConfig | Mapping[str, Any] | MutableSequence[str] | logging.Logger | None = None,
    mapping: RelayMapping = None,
) -> EventLogger:
    """
    Attach an EventLogger to a watchable.

    Args:
        source: Watchable whose events are logged
        options: Logger configuration (see EventLogger)
        mapping: Which events to log and under what names

    Returns:
        The attached EventLogger; close() it to stop logging
    """
    config = getattr(source, "watchable_config", None)
    wildcard = config.relay_wildcard if config is not None else DEFAULT_WILDCARD
    logger_relay = EventLogger(options, mapping, wildcard=wildcard)
    relay_events(source, logger_relay)
    return logger_relay


__all__ = [
    "EVENT_LOGGER_NAME",
    "EventLogConfig",
    "EventLogger",
    "log_events",
]
