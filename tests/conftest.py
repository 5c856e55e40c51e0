from __future__ import annotations

import typing as t

import pytest

from topiclog.logging import core
from topiclog.logging.logger import LoggerContainer
from topiclog.logging.registry import TransportRegistry
from topiclog.logging.transports import BaseTransport


class MemoryTransport(BaseTransport):
    """Keeps every emitted record in memory."""

    kind = "Memory"

    def __init__(self, options: t.Mapping[str, t.Any] | None = None, **overrides: t.Any):
        super().__init__(options, **overrides)
        self.records: list[dict[str, t.Any]] = []
        self.closed = False

    def emit(self, event_dict: dict[str, t.Any]) -> None:
        self.records.append(event_dict)

    def close(self) -> None:
        self.closed = True


class FailingTransport(BaseTransport):
    """Raises on every delivery, like a disk that has gone away."""

    kind = "Failing"

    def emit(self, event_dict: dict[str, t.Any]) -> None:
        raise OSError("disk full")

    def close(self) -> None:
        pass


class RecordingSink:
    """Stand-in for the diagnostic logger."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, t.Any]]] = []

    def error(self, event: str, **kw: t.Any) -> None:
        self.calls.append((event, kw))


@pytest.fixture(autouse=True)
def reset_process_logging() -> t.Iterator[None]:
    """Every test starts without configuration or registered loggers."""
    core.reset()
    yield
    core.reset()


@pytest.fixture
def registry() -> TransportRegistry:
    registry = TransportRegistry()
    registry.register("Memory", MemoryTransport)
    registry.register("Failing", FailingTransport)
    return registry


@pytest.fixture
def container() -> t.Iterator[LoggerContainer]:
    container = LoggerContainer()
    yield container
    container.close_all()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
