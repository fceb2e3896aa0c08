"""Per-day, per-account raw history storage."""

from __future__ import annotations

import logging
from typing import Any

from history_insights.browser.keys import history_key
from history_insights.browser.models import Account, HistoryRecord
from history_insights.exceptions import InvalidArgumentError, NotFoundError
from history_insights.kvstore.base import AsyncKeyValueStore

logger = logging.getLogger(__name__)


class HistoryStore:
    """Read and write ``browser-history:{date}:{email}`` documents."""

    def __init__(self, store: AsyncKeyValueStore) -> None:
        self._store = store

    async def put(self, date: str, account: Account, data: list[Any]) -> None:
        if not isinstance(data, list):
            raise InvalidArgumentError("history data must be a list")
        record = HistoryRecord(account=account, history=data)
        await self._store.set(history_key(date, account.email), record.to_dict())
        logger.info("Stored %d history items for %s on %s", len(data), account.email, date)

    async def get(self, date: str, email: str) -> HistoryRecord:
        raw = await self._store.get(history_key(date, email))
        try:
            return HistoryRecord.from_dict(raw)
        except ValueError:
            raise NotFoundError(
                f"No history found for the date: {date} and email: {email}"
            ) from None
