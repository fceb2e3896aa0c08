"""Operations exposed to the HTTP layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from history_insights.browser.history import HistoryStore
from history_insights.browser.models import Account, DailyReport, HistoryRecord
from history_insights.exceptions import InvalidArgumentError, NotFoundError
from history_insights.kvstore.base import AsyncKeyValueStore
from history_insights.reports.aggregator import aggregate_reports
from history_insights.reports.chunks import ChunkReportStore
from history_insights.reports.classifier import BaseClassifier
from history_insights.reports.daily import DailyReportCache
from history_insights.reports.progress import AdvanceResult, ChunkProgressTracker

logger = logging.getLogger(__name__)


@dataclass
class JobStatus:
    """Read-only snapshot of a job's stored state."""

    next_chunk_index: int
    stored_chunks: list[int]
    has_daily_report: bool

    def to_dict(self) -> dict:
        return {
            "nextChunkIndex": self.next_chunk_index,
            "storedChunks": list(self.stored_chunks),
            "hasDailyReport": self.has_daily_report,
        }


class HistoryInsightsService:
    """Wires the history, progress, chunk and daily-report stores around one backend.

    The store handle is owned by the caller; this class never opens or
    closes it.
    """

    def __init__(self, store: AsyncKeyValueStore, classifier: BaseClassifier) -> None:
        self.store = store
        self.history = HistoryStore(store)
        self.chunks = ChunkReportStore(store)
        self.daily = DailyReportCache(store)
        self.tracker = ChunkProgressTracker(store, self.history, self.chunks, classifier)

    async def store_history_with_account(
        self, date: str, account: Account | dict, data: list[Any]
    ) -> None:
        if not isinstance(account, Account):
            try:
                account = Account.from_dict(account)
            except ValueError as e:
                raise InvalidArgumentError(str(e)) from e
        await self.history.put(date, account, data)

    async def get_history(self, date: str, email: str) -> HistoryRecord:
        return await self.history.get(date, email)

    async def process_next_chunk(self, date: str, email: str, chunk_size: int) -> AdvanceResult:
        return await self.tracker.advance(date, email, chunk_size)

    async def finalize_daily_report(self, date: str, email: str) -> DailyReport:
        """Aggregate every chunk report written so far and cache the result.

        A job with no chunk reports yields the neutral report, which is
        returned but not cached.
        """
        reports = await self.chunks.read_all(date, email)
        if not reports:
            logger.warning("No chunk reports found for date: %s, email: %s", date, email)
            return DailyReport.neutral()

        progress = await self.tracker.get_progress(date, email)
        if len(reports) < progress:
            logger.warning(
                "Chunk reports for %s on %s stop at index %d but progress is %d; "
                "aggregating the first %d only",
                email, date, len(reports), progress, len(reports),
            )

        report = aggregate_reports(reports)
        await self.daily.put(date, email, report)
        logger.info("Finalized daily report for %s on %s from %d chunks", email, date, len(reports))
        return report

    async def get_daily_report(self, date: str, email: str) -> DailyReport:
        report = await self.daily.get(date, email)
        if report is None:
            raise NotFoundError(f"No daily report found for date: {date} and email: {email}")
        return report

    async def get_job_status(self, date: str, email: str) -> JobStatus:
        return JobStatus(
            next_chunk_index=await self.tracker.get_progress(date, email),
            stored_chunks=await self.chunks.stored_indices(date, email),
            has_daily_report=await self.daily.get(date, email) is not None,
        )
