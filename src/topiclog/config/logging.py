"""
Logging Configuration.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """npm-style severities, most severe first."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    VERBOSE = "verbose"
    DEBUG = "debug"
    SILLY = "silly"

    @property
    def severity(self) -> int:
        return _SEVERITIES[self]


_SEVERITIES = {level: index for index, level in enumerate(LogLevel)}


class LoggingSettings(BaseSettings):
    """Process-level settings for the topic logger factory."""

    model_config = SettingsConfigDict(
        env_prefix="TOPICLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    config_file: str | None = Field(
        default=None,
        description="JSON file holding a {'logging': {...}} tree, read by init() when no config is passed",
    )
    cache_loggers: bool = Field(default=True, description="Reuse the logger already registered for a topic")
    console_timestamp_format: str = Field(
        default="%Y-%m-%dT%H:%M:%S.%fZ",
        description="strftime format for console timestamps",
    )
