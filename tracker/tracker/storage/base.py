"""Storage interface (port) for the device's key-value record store."""

from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Port: string values addressed by string keys."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> None: ...
