"""
topiclog Configuration Module.

Settings are read from ``TOPICLOG_*`` environment variables and ``.env``.

Usage:
    from topiclog.config import settings

    settings.config_file      # path to a JSON logging config, or None
    settings.cache_loggers    # True
"""

from .loader import load_config_file
from .logging import LoggingSettings, LogLevel

# Singleton instance
settings = LoggingSettings()

__all__ = [
    "LoggingSettings",
    "LogLevel",
    "load_config_file",
    "settings",
]
