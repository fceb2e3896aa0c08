"""Browser history records, storage keys and URL helpers."""

from history_insights.browser.history import HistoryStore
from history_insights.browser.models import (
    Account,
    CategoryFrequency,
    DailyReport,
    HistoryRecord,
    SiteVisit,
)
from history_insights.browser.parser import extract_origin, item_url_title

__all__ = [
    "HistoryStore",
    "Account",
    "CategoryFrequency",
    "DailyReport",
    "HistoryRecord",
    "SiteVisit",
    "extract_origin",
    "item_url_title",
]
