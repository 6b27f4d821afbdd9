"""
govkit -- Keyed Store

The persistence collaborator behind the resource and proposal stores.

Hosts with real storage implement KeyedStore over it; MemoryStore is the
in-process default. Iteration is always in ascending key order so listings
are deterministic.
"""

from __future__ import annotations

import abc
from collections.abc import Iterator
from typing import Generic, TypeVar

K = TypeVar("K", str, int)
V = TypeVar("V")


class KeyedStore(abc.ABC, Generic[K, V]):
    @abc.abstractmethod
    def set(self, key: K, value: V) -> bool:
        """Store value under key. Returns True if an existing entry was replaced."""
        ...

    @abc.abstractmethod
    def get(self, key: K) -> V | None: ...

    @abc.abstractmethod
    def remove(self, key: K) -> bool:
        """Delete key. Returns True if it existed."""
        ...

    @abc.abstractmethod
    def items(self) -> Iterator[tuple[K, V]]:
        """All entries in ascending key order."""
        ...

    @abc.abstractmethod
    def __len__(self) -> int: ...

    def has(self, key: K) -> bool:
        return self.get(key) is not None

    def keys(self) -> list[K]:
        return [k for k, _ in self.items()]

    def values(self) -> list[V]:
        return [v for _, v in self.items()]


class MemoryStore(KeyedStore[K, V]):
    def __init__(self) -> None:
        self._data: dict[K, V] = {}

    def set(self, key: K, value: V) -> bool:
        replaced = key in self._data
        self._data[key] = value
        return replaced

    def get(self, key: K) -> V | None:
        return self._data.get(key)

    def remove(self, key: K) -> bool:
        return self._data.pop(key, None) is not None

    def items(self) -> Iterator[tuple[K, V]]:
        for key in sorted(self._data):
            yield key, self._data[key]

    def __len__(self) -> int:
        return len(self._data)
