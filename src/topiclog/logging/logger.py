"""
Topic loggers and the process-wide logger registry.

A ``TopicLogger`` is a structlog bound logger whose processor chain ends by
fanning the event out to the topic's transports and dropping it, so nothing
reaches structlog's own output.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

import structlog
from structlog import BoundLoggerBase, DropEvent
from structlog.typing import EventDict, Processor

from topiclog.config import LogLevel

from .transports import BaseTransport

# =============================================================================
# Structlog Processors
# =============================================================================


def add_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Record the npm level name; the method name already is one."""
    event_dict["level"] = method_name
    return event_dict


def add_timestamp(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def add_topic(logger: TransportSet, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the topic name to log event."""
    event_dict["logger"] = logger.name
    return event_dict


def rename_event_key(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Rename 'event' to 'message'."""
    event_dict["message"] = event_dict.pop("event", "")
    return event_dict


def dispatch_to_transports(logger: TransportSet, method_name: str, event_dict: EventDict) -> EventDict:
    """Hand the event to every transport, then stop the chain."""
    for transport in logger.transports:
        transport.log(event_dict)
    raise DropEvent


SHARED_PROCESSORS: list[Processor] = [
    add_level,
    add_timestamp,
    add_topic,
    rename_event_key,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    dispatch_to_transports,
]


# =============================================================================
# Loggers
# =============================================================================


class TransportSet:
    """The wrapped logger of a ``TopicLogger``: a topic name and its transports."""

    def __init__(self, name: str, transports: Iterable[BaseTransport] = ()):
        self.name = name
        self.transports: tuple[BaseTransport, ...] = tuple(transports)

    def close(self) -> None:
        for transport in self.transports:
            transport.close()

    def __repr__(self) -> str:
        return f"TransportSet(name={self.name!r}, transports={list(self.transports)!r})"


class TopicLogger(BoundLoggerBase):
    """Bound logger exposing npm-style severities.

    Example:
        logger.info("Hello world!", user="alice")
        logger.log("debug", "cache miss", key="k1")
    """

    @classmethod
    def create(cls, name: str, transports: Iterable[BaseTransport] = ()) -> TopicLogger:
        return cls(TransportSet(name, transports), SHARED_PROCESSORS, {})

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def transports(self) -> tuple[BaseTransport, ...]:
        return self._logger.transports

    def error(self, event: str | None = None, **kw: Any) -> None:
        self._proxy_to_logger(LogLevel.ERROR.value, event, **kw)

    def warn(self, event: str | None = None, **kw: Any) -> None:
        self._proxy_to_logger(LogLevel.WARN.value, event, **kw)

    warning = warn

    def info(self, event: str | None = None, **kw: Any) -> None:
        self._proxy_to_logger(LogLevel.INFO.value, event, **kw)

    def verbose(self, event: str | None = None, **kw: Any) -> None:
        self._proxy_to_logger(LogLevel.VERBOSE.value, event, **kw)

    def debug(self, event: str | None = None, **kw: Any) -> None:
        self._proxy_to_logger(LogLevel.DEBUG.value, event, **kw)

    def silly(self, event: str | None = None, **kw: Any) -> None:
        self._proxy_to_logger(LogLevel.SILLY.value, event, **kw)

    def exception(self, event: str | None = None, **kw: Any) -> None:
        kw.setdefault("exc_info", True)
        self.error(event, **kw)

    def log(self, level: str | LogLevel, event: str | None = None, **kw: Any) -> None:
        """Log at ``level`` given by name.

        Raises:
            ValueError: ``level`` is not one of the npm level names
        """
        if isinstance(level, str):
            level = level.lower()
        self._proxy_to_logger(LogLevel(level).value, event, **kw)

    def close(self) -> None:
        """Close all transports of this logger."""
        self._logger.close()


class LoggerContainer:
    """Name-keyed registry of topic loggers."""

    def __init__(self) -> None:
        self._loggers: dict[str, TopicLogger] = {}

    def add(self, name: str, transports: Iterable[BaseTransport] = ()) -> TopicLogger:
        """Register a logger for ``name``; an existing one is replaced and closed."""
        previous = self._loggers.get(name)
        logger = TopicLogger.create(name, transports)
        self._loggers[name] = logger
        if previous is not None:
            previous.close()
        return logger

    def get(self, name: str) -> TopicLogger | None:
        return self._loggers.get(name)

    def has(self, name: str) -> bool:
        return name in self._loggers

    __contains__ = has

    def names(self) -> list[str]:
        return list(self._loggers)

    def close(self, name: str) -> None:
        logger = self._loggers.pop(name, None)
        if logger is not None:
            logger.close()

    def close_all(self) -> None:
        for name in list(self._loggers):
            self.close(name)


# Process-wide registry
loggers = LoggerContainer()


__all__ = [
    "LoggerContainer",
    "SHARED_PROCESSORS",
    "TopicLogger",
    "TransportSet",
    "loggers",
]
