"""
Set-once store for the logging configuration tree.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

# =============================================================================
# Types & Constants
# =============================================================================

TransportConfig = dict[str, Any]
ContainerConfig = dict[str, Any]
LoggingConfig = dict[str, ContainerConfig]

DEFAULT_TOPIC = "default"
INHERIT_DEFAULT_KEY = "inheritDefault"

# Used when no configuration (or no "default" container) is available
BUILTIN_CONTAINER: ContainerConfig = {"console": {}}


def builtin_config() -> LoggingConfig:
    """Return a fresh copy of the builtin configuration tree."""
    return {DEFAULT_TOPIC: copy.deepcopy(BUILTIN_CONTAINER)}


def deep_merge(*sources: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge mappings into a new dict; later sources win.

    Nested mappings are merged key by key, every other value is deep-copied
    and replaces what was there before. Lists are values too: a later list
    replaces an earlier one wholesale rather than merging index by index.
    Sources are never modified.
    """
    merged: dict[str, Any] = {}
    for source in sources:
        for key, value in source.items():
            current = merged.get(key)
            if isinstance(value, Mapping) and isinstance(current, dict):
                merged[key] = deep_merge(current, value)
            elif isinstance(value, Mapping):
                merged[key] = deep_merge(value)
            else:
                merged[key] = copy.deepcopy(value)
    return merged


def _extract_logging(raw_config: Any) -> Any:
    if isinstance(raw_config, Mapping):
        return raw_config.get("logging")
    return getattr(raw_config, "logging", None)


# =============================================================================
# Store
# =============================================================================


class ConfigStore:
    """Holds the logging configuration tree; the first initialization wins.

    Readers only ever receive deep copies, so resolving topics can never
    change what later lookups see.
    """

    def __init__(self, raw_config: Any = None):
        self._config: LoggingConfig = {}
        if raw_config is not None:
            self.initialize(raw_config)

    def initialize(self, raw_config: Any) -> None:
        """Capture ``raw_config["logging"]`` unless a configuration is already set.

        Anything that is not a mapping under ``logging`` degrades to the
        builtin single-console configuration. An empty ``logging`` mapping
        leaves the store empty.
        """
        if self._config:
            return

        logging_config = _extract_logging(raw_config)
        if isinstance(logging_config, Mapping):
            self._config = deep_merge(self._config, logging_config)
        else:
            self._config = builtin_config()

    @property
    def is_initialized(self) -> bool:
        return bool(self._config)

    def snapshot(self) -> LoggingConfig:
        """Return a deep copy of the current configuration tree."""
        return copy.deepcopy(self._config)

    def __contains__(self, topic: object) -> bool:
        return topic in self._config

    def clear(self) -> None:
        """Forget the stored configuration (used by tests)."""
        self._config = {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(topics={sorted(self._config)!r})"


__all__ = [
    "BUILTIN_CONTAINER",
    "DEFAULT_TOPIC",
    "INHERIT_DEFAULT_KEY",
    "ConfigStore",
    "ContainerConfig",
    "LoggingConfig",
    "TransportConfig",
    "builtin_config",
    "deep_merge",
]
