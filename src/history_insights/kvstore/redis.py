"""Redis key-value store backend."""

from __future__ import annotations

import json
import logging
from typing import Any

from history_insights.config import DEFAULT_REDIS_URL
from history_insights.exceptions import StoreError
from history_insights.kvstore.base import AsyncKeyValueStore

logger = logging.getLogger(__name__)


class RedisKeyValueStore(AsyncKeyValueStore):
    """JSON documents in Redis strings via ``redis.asyncio``."""

    def __init__(self, url: str = DEFAULT_REDIS_URL, client: Any | None = None):
        if client is None:
            try:
                import redis.asyncio as aioredis
            except ImportError:
                raise ImportError(
                    "redis is required for RedisKeyValueStore. "
                    "Install with: pip install history-insights[redis]"
                )
            client = aioredis.from_url(url, decode_responses=True)
        self.url = url
        self._client = client

    @property
    def client(self):
        """Access the underlying redis client for advanced usage."""
        return self._client

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(key)
        except Exception as e:
            raise StoreError(f"Redis GET {key} failed: {e}") from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StoreError(f"Stored value at {key} is not valid JSON") from e

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._client.set(key, json.dumps(value))
        except Exception as e:
            raise StoreError(f"Redis SET {key} failed: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except Exception as e:
            raise StoreError(f"Redis DEL {key} failed: {e}") from e

    async def keys(self, pattern: str) -> list[str]:
        try:
            return sorted([k async for k in self._client.scan_iter(match=pattern)])
        except Exception as e:
            raise StoreError(f"Redis SCAN {pattern} failed: {e}") from e

    async def compare_and_set(self, key: str, expected: Any | None, value: Any) -> bool:
        from redis.exceptions import WatchError

        try:
            async with self._client.pipeline(transaction=True) as pipe:
                await pipe.watch(key)
                raw = await pipe.get(key)
                current = json.loads(raw) if raw is not None else None
                if current != expected:
                    await pipe.unwatch()
                    return False
                pipe.multi()
                pipe.set(key, json.dumps(value))
                await pipe.execute()
                return True
        except WatchError:
            logger.info("Concurrent write detected on %s", key)
            return False
        except ValueError as e:
            raise StoreError(f"Stored value at {key} is not valid JSON") from e
        except Exception as e:
            raise StoreError(f"Redis compare-and-set on {key} failed: {e}") from e

    async def close(self) -> None:
        """Close the connection pool."""
        await self._client.aclose()
