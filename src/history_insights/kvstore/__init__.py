"""Key-value store backends with abstract base."""

from __future__ import annotations

from typing import TYPE_CHECKING

from history_insights.kvstore.base import AsyncKeyValueStore
from history_insights.kvstore.memory import InMemoryKeyValueStore
from history_insights.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from history_insights.config import Settings


def create_store(settings: "Settings") -> AsyncKeyValueStore:
    """Build the backend named by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.store_backend == "redis":
        from history_insights.kvstore.redis import RedisKeyValueStore
        return RedisKeyValueStore(url=settings.redis_url)
    raise InvalidArgumentError(f"Unknown store backend: {settings.store_backend!r}")


def __getattr__(name):
    """Lazy import for the backend that requires an optional dependency."""
    if name == "RedisKeyValueStore":
        from history_insights.kvstore.redis import RedisKeyValueStore
        return RedisKeyValueStore
    raise AttributeError(f"module 'history_insights.kvstore' has no attribute {name!r}")


__all__ = [
    "AsyncKeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
    "create_store",
]
