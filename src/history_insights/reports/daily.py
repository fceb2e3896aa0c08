"""Finalized daily report storage."""

from __future__ import annotations

from history_insights.browser.keys import daily_report_key
from history_insights.browser.models import DailyReport
from history_insights.exceptions import StoreError
from history_insights.kvstore.base import AsyncKeyValueStore


class DailyReportCache:
    def __init__(self, store: AsyncKeyValueStore) -> None:
        self._store = store

    async def put(self, date: str, email: str, report: DailyReport) -> None:
        await self._store.set(daily_report_key(date, email), report.to_dict())

    async def get(self, date: str, email: str) -> DailyReport | None:
        key = daily_report_key(date, email)
        raw = await self._store.get(key)
        if raw is None:
            return None
        try:
            return DailyReport.from_dict(raw)
        except ValueError as e:
            raise StoreError(f"Corrupt daily report at {key}: {e}") from e
