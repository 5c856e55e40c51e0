"""
Interceptors for routing standard library logging into topic loggers.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from topiclog.config import LogLevel

from .resolver import LoggerResolver


def level_for_record(record: logging.LogRecord) -> LogLevel:
    """Map a stdlib level number onto the npm levels."""
    if record.levelno >= logging.ERROR:
        return LogLevel.ERROR
    if record.levelno >= logging.WARNING:
        return LogLevel.WARN
    if record.levelno >= logging.INFO:
        return LogLevel.INFO
    if record.levelno >= logging.DEBUG:
        return LogLevel.DEBUG
    return LogLevel.SILLY


class TopicLogHandler(logging.Handler):
    """
    Forward standard library records to topic loggers.

    The topic is the record's logger name unless a fixed ``topic`` is given.
    Without a ``resolver`` the process-wide one behind ``get_logger`` is used.
    """

    def __init__(
        self,
        resolver: LoggerResolver | None = None,
        topic: str | None = None,
        level: int = logging.NOTSET,
    ):
        super().__init__(level)
        self._resolver = resolver
        self._topic = topic

    def _get_resolver(self) -> LoggerResolver:
        if self._resolver is None:
            from .core import get_resolver

            return get_resolver()
        return self._resolver

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            logger = self._get_resolver().resolve(self._topic or record.name or "root")
            logger.log(level_for_record(record), msg, module=record.module)
        except Exception:
            self.handleError(record)


def intercept_stdlib_loggers(
    names: Iterable[str],
    resolver: LoggerResolver | None = None,
    topic: str | None = None,
) -> TopicLogHandler:
    """Replace the handlers of the named stdlib loggers with one ``TopicLogHandler``."""
    handler = TopicLogHandler(resolver=resolver, topic=topic)
    for name in names:
        lg = logging.getLogger(name)
        lg.handlers = [handler]
        lg.propagate = False
    return handler
