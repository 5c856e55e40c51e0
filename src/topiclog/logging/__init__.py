"""
Per-topic logger factory for topiclog.

One configuration tree, captured once, describes the transports of every
topic:

- default: container used by topics without their own entry
- <topic>: container for one topic, optionally with "inheritDefault"

Transport kinds: console, file, http, gcloud ("file#debug" style keys allow
several transports of one kind).

Design Pattern: Strategy Pattern for transport construction.
Library: structlog for the logger pipeline, orjson for JSON output.
"""

from .core import get_logger, get_resolver, init, reset
from .logger import LoggerContainer, TopicLogger, loggers
from .registry import TransportKind, TransportRegistry, UnknownTransportError
from .resolver import LoggerResolver, TransportErrorObserver
from .store import ConfigStore

__all__ = [
    "ConfigStore",
    "LoggerContainer",
    "LoggerResolver",
    "TopicLogger",
    "TransportErrorObserver",
    "TransportKind",
    "TransportRegistry",
    "UnknownTransportError",
    "get_logger",
    "get_resolver",
    "init",
    "loggers",
    "reset",
]
