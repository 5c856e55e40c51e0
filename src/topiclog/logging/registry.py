"""
TransportRegistry: maps transport-kind tags to constructors.

Configuration keys look like ``console`` or ``file#debug``; the part before
``#`` with its first character upper-cased is the kind tag looked up here:

- Console: ConsoleTransport
- File: FileTransport
- Http: HttpTransport
- Gcloud: GCloudTransport
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from enum import Enum
from typing import Any

from .transports import BaseTransport, ConsoleTransport, FileTransport, GCloudTransport, HttpTransport

TransportFactory = Callable[[Mapping[str, Any]], BaseTransport]

DISCRIMINATOR_SEPARATOR = "#"


class TransportKind(str, Enum):
    """Builtin transport kinds."""

    CONSOLE = "Console"
    FILE = "File"
    HTTP = "Http"
    GCLOUD = "Gcloud"


class UnknownTransportError(LookupError):
    """Raised when no constructor is registered for a transport kind."""

    def __init__(self, kind: str, known: list[str]):
        self.kind = kind
        self.known = known
        super().__init__(f"Unsupported transport kind: {kind!r}. Supported: {known}")


def split_transport_key(key: str) -> tuple[str, str | None]:
    """Split ``"file#debug"`` into ``("file", "debug")``."""
    base, sep, discriminator = key.partition(DISCRIMINATOR_SEPARATOR)
    return base, (discriminator if sep else None)


def kind_from_key(key: str) -> str:
    """Derive the registry tag for a transport key: ``"file#debug"`` -> ``"File"``."""
    base, _ = split_transport_key(key)
    return base[:1].upper() + base[1:]


# Kind tag -> constructor table (Strategy Pattern)
_BUILTIN_FACTORIES: dict[str, TransportFactory] = {
    TransportKind.CONSOLE.value: ConsoleTransport,
    TransportKind.FILE.value: FileTransport,
    TransportKind.HTTP.value: HttpTransport,
    TransportKind.GCLOUD.value: GCloudTransport,
}


class TransportRegistry:
    """Case-sensitive mapping from kind tag to transport constructor."""

    def __init__(self, factories: Mapping[str, TransportFactory] | None = None):
        self._factories: dict[str, TransportFactory] = dict(_BUILTIN_FACTORIES if factories is None else factories)

    def register(self, kind: str, factory: TransportFactory) -> None:
        """Register (or replace) the constructor for ``kind``."""
        self._factories[kind] = factory

    def create(self, kind: str, options: Mapping[str, Any]) -> BaseTransport:
        """
        Construct a transport of ``kind``.

        Raises:
            UnknownTransportError: no constructor is registered for ``kind``
            pydantic.ValidationError: the options are invalid for ``kind``
        """
        factory = self._factories.get(kind)
        if factory is None:
            raise UnknownTransportError(kind, self.kinds())
        return factory(options)

    def kinds(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, kind: object) -> bool:
        return kind in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self.kinds())


__all__ = [
    "DISCRIMINATOR_SEPARATOR",
    "TransportFactory",
    "TransportKind",
    "TransportRegistry",
    "UnknownTransportError",
    "kind_from_key",
    "split_transport_key",
]
