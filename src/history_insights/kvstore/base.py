"""Abstract base class for key-value store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AsyncKeyValueStore(ABC):
    """Async interface for a JSON document key-value store.

    Values are JSON-compatible documents (dicts, lists, strings, numbers).
    No transactions are implied beyond ``compare_and_set`` on a single key.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the document stored under ``key``, or None."""
        ...

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous document."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...

    @abstractmethod
    async def keys(self, pattern: str) -> list[str]:
        """Return keys matching a glob-style ``pattern``."""
        ...

    @abstractmethod
    async def compare_and_set(self, key: str, expected: Any | None, value: Any) -> bool:
        """Store ``value`` only if the current document equals ``expected``.

        ``expected=None`` means the key must be absent. Returns True when the
        write happened.
        """
        ...

    async def close(self) -> None:
        """Release backend resources."""
        return None
