"""
LoggerResolver: builds per-topic loggers from a ``ConfigStore``.

Resolution of a topic:

1. the ``default`` container (or the builtin single console) is the fallback;
2. the topic's own container is used when configured, else the fallback;
3. ``inheritDefault`` merges the fallback under the topic's container and is
   removed;
4. every remaining key names a transport: ``label`` defaults to the topic,
   ``name`` is the key, and the kind tag picks the constructor.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from .logger import LoggerContainer, TopicLogger, loggers
from .registry import TransportRegistry, kind_from_key
from .store import (
    BUILTIN_CONTAINER,
    DEFAULT_TOPIC,
    INHERIT_DEFAULT_KEY,
    ConfigStore,
    ContainerConfig,
    deep_merge,
)
from .transports import BaseTransport

_diagnostics = structlog.get_logger("topiclog.diagnostics")


@dataclass(frozen=True)
class TransportErrorObserver:
    """Reports a transport's delivery errors to the diagnostic sink and swallows them."""

    transport_name: str
    topic: str
    sink: Any = None

    def __call__(self, exc: BaseException) -> None:
        sink = self.sink if self.sink is not None else _diagnostics
        try:
            sink.error(
                "transport_error_ignored",
                transport=self.transport_name,
                topic=self.topic,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        except Exception:
            pass  # Must never break the logging call that triggered it


class LoggerResolver:
    """Resolves topic names to ``TopicLogger`` instances.

    Args:
        config: a ``ConfigStore`` (shared, read on every resolution) or a plain
            ``{"topic": {...}}`` logging mapping. ``None`` means builtin defaults.
        registry: transport constructors; defaults to the builtin kinds.
        container: logger registry; defaults to the process-wide one.
        cache: return the logger already registered for a topic instead of
            building new transports on every call.
        diagnostics: logger receiving transport errors.
    """

    def __init__(
        self,
        config: ConfigStore | Mapping[str, Any] | None = None,
        *,
        registry: TransportRegistry | None = None,
        container: LoggerContainer | None = None,
        cache: bool = True,
        diagnostics: Any = None,
    ):
        if isinstance(config, ConfigStore):
            self._store = config
        else:
            self._store = ConfigStore()
            if config is not None:
                self._store.initialize({"logging": config})
        self._registry = registry or TransportRegistry()
        self._container = container if container is not None else loggers
        self._cache = cache
        self._diagnostics = diagnostics

    @property
    def store(self) -> ConfigStore:
        return self._store

    @property
    def registry(self) -> TransportRegistry:
        return self._registry

    @property
    def container(self) -> LoggerContainer:
        return self._container

    def resolve_config(self, topic_name: str) -> ContainerConfig:
        """Return the fully resolved transport configuration for a topic.

        Works on a deep copy; the store is never modified.
        """
        snapshot = self._store.snapshot()

        if DEFAULT_TOPIC in snapshot:
            default_config = snapshot[DEFAULT_TOPIC]
        else:
            default_config = copy.deepcopy(BUILTIN_CONTAINER)

        # Containers that are not mappings hold no transports
        if not isinstance(default_config, dict):
            default_config = {}

        topic_config = snapshot[topic_name] if topic_name in snapshot else default_config
        if not isinstance(topic_config, dict):
            topic_config = {}

        if INHERIT_DEFAULT_KEY in topic_config:
            inherit = topic_config.pop(INHERIT_DEFAULT_KEY)
            if inherit:
                default_config.pop(INHERIT_DEFAULT_KEY, None)
                topic_config = deep_merge(default_config, topic_config)

        resolved: ContainerConfig = {}
        for key, options in topic_config.items():
            transport_options = dict(options) if isinstance(options, Mapping) else {}
            transport_options.setdefault("label", topic_name)
            transport_options["name"] = key
            resolved[key] = transport_options
        return resolved

    def build_transports(self, topic_name: str) -> list[BaseTransport]:
        """Construct the transports for a topic, each with an error observer attached."""
        transports: list[BaseTransport] = []
        try:
            for key, options in self.resolve_config(topic_name).items():
                transport = self._registry.create(kind_from_key(key), options)
                transport.on_error(TransportErrorObserver(key, topic_name, self._diagnostics))
                transports.append(transport)
        except Exception:
            for transport in transports:
                transport.close()
            raise
        return transports

    def resolve(self, topic_name: str) -> TopicLogger:
        """
        Return the logger for ``topic_name``.

        Raises:
            UnknownTransportError: a transport key names an unregistered kind
            pydantic.ValidationError: transport options are invalid
        """
        if self._cache:
            existing = self._container.get(topic_name)
            if existing is not None:
                return existing
        return self._container.add(topic_name, self.build_transports(topic_name))

    def close(self, topic_name: str) -> None:
        self._container.close(topic_name)

    def close_all(self) -> None:
        self._container.close_all()


__all__ = ["LoggerResolver", "TransportErrorObserver"]
