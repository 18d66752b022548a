"""Pluggable response cache capability."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class Cache(ABC):
    """Key-value store for serialized completion responses.

    Implementations must be safe under concurrent ``get``/``set`` calls from
    multiple tasks.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None if missing or expired."""

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: float) -> None:
        """Store ``value`` for ``ttl`` seconds."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a single entry."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove all entries."""

    def is_enabled(self) -> bool:
        return True

    def name(self) -> str:
        return 'cache'


class NoopCache(Cache):
    """Disabled cache: never stores anything, so every lookup misses."""

    async def get(self, key: str) -> Optional[bytes]:
        return None

    async def set(self, key: str, value: bytes, ttl: float) -> None:
        return None

    async def delete(self, key: str) -> None:
        return None

    async def clear(self) -> None:
        return None

    def is_enabled(self) -> bool:
        return False

    def name(self) -> str:
        return 'noop'
