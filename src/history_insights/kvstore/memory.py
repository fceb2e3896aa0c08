"""In-process key-value store backend."""

from __future__ import annotations

import asyncio
import json
from fnmatch import fnmatchcase
from typing import Any

from history_insights.kvstore.base import AsyncKeyValueStore


class InMemoryKeyValueStore(AsyncKeyValueStore):
    """Dict-backed store that serializes documents like a remote backend would.

    Documents go through ``json`` on the way in and out, so callers never
    share mutable state with the store.
    """

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else None

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self, pattern: str) -> list[str]:
        return sorted(k for k in self._data if fnmatchcase(k, pattern))

    async def compare_and_set(self, key: str, expected: Any | None, value: Any) -> bool:
        async with self._lock:
            current = await self.get(key)
            if current != expected:
                return False
            await self.set(key, value)
            return True
