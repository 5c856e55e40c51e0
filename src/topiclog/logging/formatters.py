"""
Log formatters and color utilities.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import orjson
from structlog.typing import EventDict

# =============================================================================
# JSON
# =============================================================================


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(
        v,
        default=default if default is not None else str,
        option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC | orjson.OPT_NON_STR_KEYS,
    ).decode()


# =============================================================================
# Console Formatter
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "error": "\033[31m",
    "warn": "\033[33m",
    "info": "\033[32m",
    "verbose": "\033[36m",
    "debug": "\033[34m",
    "silly": "\033[35m",
    "timestamp": "\033[90m",
    "key": "\033[34m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Renders records as ``<timestamp> - <level>: [<label>] <message> key=value``."""

    EXCLUDED_KEYS = {"level", "message", "event", "label", "logger", "timestamp"}
    TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

    @classmethod
    def configure(cls, *, timestamp_format: str | None = None) -> None:
        """Configure rendering parameters."""
        if timestamp_format:
            cls.TIMESTAMP_FORMAT = timestamp_format

    @classmethod
    def _format_timestamp(cls, raw_timestamp: str | None) -> str:
        if raw_timestamp:
            try:
                dt = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
                return dt.astimezone(timezone.utc).strftime(cls.TIMESTAMP_FORMAT)
            except (ValueError, TypeError):
                pass
        return datetime.now(timezone.utc).strftime(cls.TIMESTAMP_FORMAT)

    @staticmethod
    def _maybe_color(text: str, color: str, use_color: bool) -> str:
        if not use_color:
            return text
        return colorize(text, color)

    @classmethod
    def format(
        cls,
        event_dict: EventDict,
        *,
        use_color: bool = False,
        show_timestamp: bool = False,
    ) -> str:
        """Format an event dict into a single line."""
        level = str(event_dict.get("level", "info")).lower()
        message = str(event_dict.get("message", event_dict.get("event", "")))
        label = event_dict.get("label")

        parts = []
        if show_timestamp:
            timestamp = cls._format_timestamp(event_dict.get("timestamp"))
            parts.append(cls._maybe_color(timestamp, "timestamp", use_color) + " - ")

        parts.append(cls._maybe_color(level, level, use_color) + ": ")
        if label:
            parts.append(f"[{label}] ")
        parts.append(message)

        extras = []
        for k, v in event_dict.items():
            if k in cls.EXCLUDED_KEYS:
                continue
            extras.append(f"{cls._maybe_color(k, 'key', use_color)}={cls._maybe_color(str(v), 'dim', use_color)}")
        if extras:
            parts.append(" " + " ".join(extras))

        return "".join(parts)
