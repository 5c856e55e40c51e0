"""
Process-wide entry points: ``init`` once, then ``get_logger`` per topic.
"""

from __future__ import annotations

from typing import Any

from topiclog.config import load_config_file, settings

from .formatters import ConsoleFormatter
from .logger import TopicLogger
from .resolver import LoggerResolver
from .store import ConfigStore

# =============================================================================
# Global State
# =============================================================================

_store = ConfigStore()
_resolver: LoggerResolver | None = None


def _get_resolver() -> LoggerResolver:
    global _resolver
    if _resolver is None:
        _resolver = LoggerResolver(_store, cache=settings.cache_loggers)
    return _resolver


def init(config: Any = None) -> None:
    """
    Initialize logging with the given configuration.

    Only the first call that sets a configuration takes effect, so call this at
    the very beginning of the program before modules obtain their loggers.

    Args:
        config: Outer configuration object whose ``logging`` key maps topic
            names (and ``"default"``) to transport containers. When ``None``,
            the JSON file named by ``TOPICLOG_CONFIG_FILE`` is read, if set.
            Anything without a ``logging`` mapping falls back to a single
            console transport.

    Example:
        init({"logging": {"default": {"console": {"level": "debug"}}}})
        get_logger("MyApp").info("Hello world!")
        # info: [MyApp] Hello world!
    """
    if _store.is_initialized:
        return

    if config is None:
        config = load_config_file(settings.config_file) if settings.config_file else {}

    ConsoleFormatter.configure(timestamp_format=settings.console_timestamp_format)
    _store.initialize(config)

    # Loggers obtained before init() were built from the builtin fallback
    if _store.is_initialized and _resolver is not None:
        _resolver.close_all()


def get_logger(topic_name: str) -> TopicLogger:
    """Get the logger for a topic, creating it on first use.

    Transport labels default to ``topic_name`` so output reads
    ``info: [topic_name] message``.
    """
    return _get_resolver().resolve(topic_name)


def get_resolver() -> LoggerResolver:
    """Return the resolver behind ``get_logger``."""
    return _get_resolver()


def reset() -> None:
    """Close all loggers and forget the configuration (used by tests)."""
    global _resolver
    if _resolver is not None:
        _resolver.close_all()
    _store.clear()
    _resolver = None
