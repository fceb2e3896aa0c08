"""Per-chunk classification results."""

from __future__ import annotations

import logging

from history_insights.browser.keys import chunk_report_key, chunk_report_pattern
from history_insights.browser.models import DailyReport
from history_insights.exceptions import StoreError
from history_insights.kvstore.base import AsyncKeyValueStore

logger = logging.getLogger(__name__)


class ChunkReportStore:
    """One report per ``(date, email, chunk index)``.

    ``read_all`` walks indices 0, 1, 2, ... and stops at the first missing
    one. The number of chunks in a job is never stored, so that gap is the
    only end marker.
    """

    def __init__(self, store: AsyncKeyValueStore) -> None:
        self._store = store

    async def put(self, date: str, email: str, index: int, report: DailyReport) -> None:
        await self._store.set(chunk_report_key(date, email, index), report.to_dict())

    async def get(self, date: str, email: str, index: int) -> DailyReport | None:
        key = chunk_report_key(date, email, index)
        raw = await self._store.get(key)
        if raw is None:
            return None
        try:
            return DailyReport.from_dict(raw)
        except ValueError as e:
            raise StoreError(f"Corrupt chunk report at {key}: {e}") from e

    async def read_all(self, date: str, email: str) -> list[DailyReport]:
        reports: list[DailyReport] = []
        while True:
            report = await self.get(date, email, len(reports))
            if report is None:
                break
            reports.append(report)
        return reports

    async def stored_indices(self, date: str, email: str) -> list[int]:
        """Indices that currently have a report, found by key listing."""
        pattern = chunk_report_pattern(date, email)
        prefix = pattern[:-1]
        indices = []
        for key in await self._store.keys(pattern):
            suffix = key[len(prefix):]
            if suffix.isdigit():
                indices.append(int(suffix))
        return sorted(indices)
