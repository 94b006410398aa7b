"""In-process dict implementation of KeyValueStore."""

from __future__ import annotations


class MemoryKeyValueStore:
    """KeyValueStore backed by a dict. Lost on restart."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def put(self, key: str, value: str) -> None:
        self._values[key] = value
