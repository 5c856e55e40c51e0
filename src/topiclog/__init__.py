from topiclog.logging import (
    ConfigStore,
    LoggerResolver,
    TopicLogger,
    UnknownTransportError,
    get_logger,
    init,
)

__all__ = [
    "ConfigStore",
    "LoggerResolver",
    "TopicLogger",
    "UnknownTransportError",
    "get_logger",
    "init",
]
