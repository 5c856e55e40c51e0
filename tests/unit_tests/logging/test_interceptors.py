"""
Standard library interception tests.
"""

from __future__ import annotations

import logging

import pytest

from topiclog.config import LogLevel
from topiclog.logging.interceptors import TopicLogHandler, intercept_stdlib_loggers, level_for_record
from topiclog.logging.logger import LoggerContainer
from topiclog.logging.registry import TransportRegistry
from topiclog.logging.resolver import LoggerResolver


@pytest.fixture
def resolver(registry: TransportRegistry, container: LoggerContainer) -> LoggerResolver:
    return LoggerResolver({"default": {"memory": {"level": "silly"}}}, registry=registry, container=container)


def _records(resolver: LoggerResolver, topic: str) -> list[dict]:
    return resolver.resolve(topic).transports[0].records


class TestLevelMapping:
    @pytest.mark.parametrize(
        ("levelno", "expected"),
        [
            (logging.CRITICAL, LogLevel.ERROR),
            (logging.ERROR, LogLevel.ERROR),
            (logging.WARNING, LogLevel.WARN),
            (logging.INFO, LogLevel.INFO),
            (logging.DEBUG, LogLevel.DEBUG),
            (5, LogLevel.SILLY),
        ],
    )
    def test_stdlib_to_npm(self, levelno: int, expected: LogLevel) -> None:
        record = logging.LogRecord("x", levelno, __file__, 1, "msg", None, None)
        assert level_for_record(record) is expected


class TestTopicLogHandler:
    def test_records_reach_topic_named_after_logger(self, resolver: LoggerResolver) -> None:
        stdlib_logger = logging.getLogger("topiclog.tests.uvicorn")
        stdlib_logger.setLevel(logging.DEBUG)
        handler = intercept_stdlib_loggers(["topiclog.tests.uvicorn"], resolver=resolver)
        try:
            stdlib_logger.warning("port %d busy", 8000)
        finally:
            stdlib_logger.removeHandler(handler)

        (record,) = _records(resolver, "topiclog.tests.uvicorn")
        assert record["level"] == "warn"
        assert record["message"] == "port 8000 busy"
        assert record["label"] == "topiclog.tests.uvicorn"
        assert stdlib_logger.propagate is False

    def test_fixed_topic(self, resolver: LoggerResolver) -> None:
        stdlib_logger = logging.getLogger("topiclog.tests.fixed")
        stdlib_logger.setLevel(logging.INFO)
        handler = TopicLogHandler(resolver=resolver, topic="ThirdParty")
        stdlib_logger.addHandler(handler)
        try:
            stdlib_logger.info("connected")
        finally:
            stdlib_logger.removeHandler(handler)

        assert [r["message"] for r in _records(resolver, "ThirdParty")] == ["connected"]
