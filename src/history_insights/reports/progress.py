"""Chunk progress state machine for classification jobs."""

from __future__ import annotations

import asyncio
import logging
import math
import weakref
from dataclasses import dataclass
from typing import Any

from history_insights.browser.history import HistoryStore
from history_insights.browser.keys import progress_key
from history_insights.exceptions import ConflictError, InvalidArgumentError, StoreError
from history_insights.kvstore.base import AsyncKeyValueStore
from history_insights.reports.chunks import ChunkReportStore
from history_insights.reports.classifier import BaseClassifier

logger = logging.getLogger(__name__)


@dataclass
class AdvanceResult:
    """Outcome of one ``advance`` call."""

    completed: bool
    next_chunk_index: int
    total_chunks: int
    chunk_index: int | None = None

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "chunkIndex": self.chunk_index,
            "nextChunkIndex": self.next_chunk_index,
            "totalChunks": self.total_chunks,
        }


class ChunkProgressTracker:
    """Advances a ``(date, email)`` job one chunk at a time.

    The chunk report is written before the progress counter, so a crash in
    between repeats the same index on the next call and never skips one.
    The counter itself is updated with compare-and-set against the value
    read at the start of the call; losing that race raises ConflictError.
    Calls for the same job within one process are serialized.
    """

    def __init__(
        self,
        store: AsyncKeyValueStore,
        history: HistoryStore,
        chunks: ChunkReportStore,
        classifier: BaseClassifier,
    ) -> None:
        self._store = store
        self._history = history
        self._chunks = chunks
        self._classifier = classifier
        # Entries disappear once no call holds or awaits the lock.
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    async def get_progress(self, date: str, email: str) -> int:
        """Index of the next chunk to classify (0 when the job has not started)."""
        key = progress_key(date, email)
        return _parse_progress(key, await self._store.get(key))

    async def advance(self, date: str, email: str, chunk_size: int) -> AdvanceResult:
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
            raise InvalidArgumentError(f"chunk size must be a positive integer, got {chunk_size!r}")

        lock = self._locks.get((date, email))
        if lock is None:
            lock = self._locks[(date, email)] = asyncio.Lock()
        async with lock:
            return await self._advance(date, email, chunk_size)

    async def _advance(self, date: str, email: str, chunk_size: int) -> AdvanceResult:
        record = await self._history.get(date, email)
        total_chunks = math.ceil(len(record.history) / chunk_size)

        key = progress_key(date, email)
        previous = await self._store.get(key)
        index = _parse_progress(key, previous)

        if index >= total_chunks:
            return AdvanceResult(completed=True, next_chunk_index=index, total_chunks=total_chunks)

        start = index * chunk_size
        chunk = record.history[start : start + chunk_size]
        report = await self._classifier.classify(chunk)
        await self._chunks.put(date, email, index, report)

        if not await self._store.compare_and_set(key, previous, str(index + 1)):
            raise ConflictError(
                f"Chunk progress for {date}/{email} changed while processing chunk {index}"
            )

        logger.info(
            "Processed chunk %d/%d for %s on %s (%d items)",
            index + 1, total_chunks, email, date, len(chunk),
        )
        return AdvanceResult(
            completed=False,
            next_chunk_index=index + 1,
            total_chunks=total_chunks,
            chunk_index=index,
        )


def _parse_progress(key: str, raw: Any) -> int:
    """Stored progress is a decimal string; plain integers are accepted too."""
    if raw is None:
        return 0
    if isinstance(raw, bool):
        raise StoreError(f"Corrupt chunk progress at {key}: {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise StoreError(f"Corrupt chunk progress at {key}: {raw!r}") from None
    if value < 0:
        raise StoreError(f"Corrupt chunk progress at {key}: {raw!r}")
    return value
