"""
Transport abstractions and concrete implementations.

A transport is a sink that receives processed log records from a
``TopicLogger``. Each kind validates its options with a pydantic model so the
free-form JSON configuration can be passed through unchanged.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator
from structlog.typing import EventDict

from topiclog.config import LogLevel

from .formatters import ConsoleFormatter, orjson_dumps

if TYPE_CHECKING:
    from google.cloud.logging import Client as GCloudLoggingClient

ErrorObserver = Callable[[BaseException], None]


# =============================================================================
# Options
# =============================================================================


class TransportOptions(BaseModel):
    """Options shared by every transport kind. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, arbitrary_types_allowed=True)

    name: str | None = None
    label: str | None = None
    level: LogLevel = LogLevel.INFO
    silent: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def _lower_level(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class ConsoleOptions(TransportOptions):
    colorize: bool = False
    timestamp: bool = False
    as_json: bool = Field(default=False, alias="json")
    stderr_levels: list[LogLevel] = Field(default_factory=lambda: [LogLevel.ERROR], alias="stderrLevels")
    stream: Any = None


class FileOptions(TransportOptions):
    filename: str
    maxsize: int | None = Field(default=None, gt=0)
    max_files: int = Field(default=5, ge=1, alias="maxFiles")
    as_json: bool = Field(default=True, alias="json")
    timestamp: bool = True


class HttpOptions(TransportOptions):
    host: str = "localhost"
    port: int | None = None
    path: str = "/"
    ssl: bool = False
    auth: dict[str, str] | None = None
    timeout: float = 5.0

    @property
    def url(self) -> str:
        scheme = "https" if self.ssl else "http"
        port = f":{self.port}" if self.port else ""
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        return f"{scheme}://{self.host}{port}{path}"


class GCloudOptions(TransportOptions):
    project: str | None = None
    log_name: str = Field(default="topiclog", alias="logName")


# =============================================================================
# Transport Abstraction (Strategy Pattern)
# =============================================================================


class BaseTransport(ABC):
    """Abstract base class for transports.

    ``log()`` applies the level threshold and ``silent`` flag, stamps the
    transport label and hands the record to ``emit()``. Failures inside
    ``emit()`` go to the observers registered with ``on_error()``; without
    observers they propagate.
    """

    kind: ClassVar[str] = ""
    options_model: ClassVar[type[TransportOptions]] = TransportOptions

    def __init__(self, options: Mapping[str, Any] | None = None, **overrides: Any):
        self.options = self.options_model.model_validate({**(options or {}), **overrides})
        self._observers: list[ErrorObserver] = []

    @property
    def name(self) -> str:
        return self.options.name or self.kind.lower()

    @property
    def label(self) -> str | None:
        return self.options.label

    @property
    def level(self) -> LogLevel:
        return self.options.level

    def accepts(self, level: str | LogLevel) -> bool:
        """Whether a record at ``level`` passes this transport's threshold."""
        return LogLevel(level).severity <= self.level.severity

    def on_error(self, observer: ErrorObserver) -> None:
        self._observers.append(observer)

    def log(self, event_dict: EventDict) -> None:
        level = event_dict.get("level", LogLevel.INFO.value)
        if self.options.silent or not self.accepts(level):
            return

        record = dict(event_dict)
        if self.label is not None:
            record["label"] = self.label

        try:
            self.emit(record)
        except Exception as exc:
            if not self._observers:
                raise
            for observer in self._observers:
                observer(exc)

    @abstractmethod
    def emit(self, event_dict: EventDict) -> None:
        """Deliver a record."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the transport and release resources."""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, label={self.label!r}, level={self.level.value!r})"


class ConsoleTransport(BaseTransport):
    """Writes to stdout, or stderr for the levels listed in ``stderrLevels``."""

    kind = "Console"
    options_model = ConsoleOptions
    options: ConsoleOptions

    def _stream_for(self, level: str) -> Any:
        if self.options.stream is not None:
            return self.options.stream
        if LogLevel(level) in self.options.stderr_levels:
            return sys.stderr
        return sys.stdout

    def emit(self, event_dict: EventDict) -> None:
        if self.options.as_json:
            output = orjson_dumps(event_dict)
        else:
            output = ConsoleFormatter.format(
                event_dict,
                use_color=self.options.colorize,
                show_timestamp=self.options.timestamp,
            )

        stream = self._stream_for(event_dict.get("level", LogLevel.INFO.value))
        stream.write(output + "\n")
        stream.flush()

    def close(self) -> None:
        pass


class FileTransport(BaseTransport):
    """Local file transport (JSON lines by default) with size-based rotation.

    Backups are named ``<filename>.1`` (newest) to ``<filename>.<maxFiles>``.
    """

    kind = "File"
    options_model = FileOptions
    options: FileOptions

    def __init__(self, options: Mapping[str, Any] | None = None, **overrides: Any):
        super().__init__(options, **overrides)
        self._path = Path(self.options.filename)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._path, "a", encoding="utf-8")

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, event_dict: EventDict) -> None:
        if self.options.as_json:
            line = orjson_dumps(event_dict)
        else:
            line = ConsoleFormatter.format(event_dict, show_timestamp=self.options.timestamp)
        self._file.write(line + "\n")
        self._file.flush()
        self._maybe_rotate()

    def _backup_path(self, index: int) -> Path:
        return self._path.with_name(f"{self._path.name}.{index}")

    def _maybe_rotate(self) -> None:
        if self.options.maxsize is None or self._path.stat().st_size <= self.options.maxsize:
            return
        self._file.close()
        for i in range(self.options.max_files - 1, 0, -1):
            src = self._backup_path(i)
            if src.exists():
                src.replace(self._backup_path(i + 1))
        self._path.replace(self._backup_path(1))
        self._file = open(self._path, "a", encoding="utf-8")

    def close(self) -> None:
        self._file.close()


class HttpTransport(BaseTransport):
    """POSTs each record to a collector endpoint as JSON."""

    kind = "Http"
    options_model = HttpOptions
    options: HttpOptions

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        client: httpx.Client | None = None,
        **overrides: Any,
    ):
        super().__init__(options, **overrides)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=self.options.timeout)

    @staticmethod
    def build_payload(event_dict: EventDict) -> dict[str, Any]:
        meta = {k: v for k, v in event_dict.items() if k not in {"level", "message"}}
        return {
            "method": "collect",
            "params": {
                "level": event_dict.get("level"),
                "message": event_dict.get("message", ""),
                "meta": meta,
            },
        }

    def emit(self, event_dict: EventDict) -> None:
        auth = None
        if self.options.auth:
            auth = (self.options.auth.get("username", ""), self.options.auth.get("password", ""))
        response = self._client.post(
            self.options.url,
            content=orjson_dumps(self.build_payload(event_dict)),
            headers={"Content-Type": "application/json"},
            auth=auth,
        )
        response.raise_for_status()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class GCloudTransport(BaseTransport):
    """Google Cloud Logging transport, active when google-cloud-logging is installed."""

    kind = "Gcloud"
    options_model = GCloudOptions
    options: GCloudOptions

    _SEVERITY_MAP = {
        "error": "ERROR",
        "warn": "WARNING",
        "info": "INFO",
        "verbose": "DEBUG",
        "debug": "DEBUG",
        "silly": "DEBUG",
    }

    def __init__(self, options: Mapping[str, Any] | None = None, **overrides: Any):
        super().__init__(options, **overrides)
        self._client: GCloudLoggingClient | None = None
        try:
            from google.cloud import logging as gcloud_logging

            self._client = gcloud_logging.Client(project=self.options.project)
            self._logger = self._client.logger(self.options.log_name)
            self._available = True
        except Exception:
            self._available = False
            self._logger = None

    @property
    def available(self) -> bool:
        return self._available

    def emit(self, event_dict: EventDict) -> None:
        if not self._available or not self._logger:
            return
        severity = self._SEVERITY_MAP.get(str(event_dict.get("level", "")), "DEFAULT")
        self._logger.log_struct(event_dict, severity=severity)

    def close(self) -> None:
        if self._available and self._client:
            self._client.close()


__all__ = [
    "BaseTransport",
    "ConsoleOptions",
    "ConsoleTransport",
    "ErrorObserver",
    "FileOptions",
    "FileTransport",
    "GCloudOptions",
    "GCloudTransport",
    "HttpOptions",
    "HttpTransport",
    "TransportOptions",
]
