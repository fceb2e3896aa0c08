"""End-to-end tests for the service operations over the in-memory store."""

import asyncio
import logging

import pytest

from history_insights.browser.models import Account, DailyReport, SiteVisit
from history_insights.exceptions import InvalidArgumentError, NotFoundError
from history_insights.kvstore.memory import InMemoryKeyValueStore
from history_insights.reports.classifier import BaseClassifier
from history_insights.service import HistoryInsightsService

DATE = "2024-01-01"
EMAIL = "a@b.com"


class SiteClassifier(BaseClassifier):
    """Files every visit under News, one site entry per URL."""

    async def _classify(self, chunk):
        sites = [SiteVisit(item["url"], "News", 1) for item in chunk]
        return DailyReport(
            total_visits=len(chunk),
            categories={"News": len(chunk)},
            most_visited_sites=sites,
        )


@pytest.fixture
def service():
    return HistoryInsightsService(InMemoryKeyValueStore(), SiteClassifier())


def _history(*urls):
    return [{"url": url, "title": ""} for url in urls]


def test_full_job(service):
    async def _run():
        await service.store_history_with_account(
            DATE,
            {"email": EMAIL, "name": "Ann"},
            _history("https://a.com/1", "https://a.com/2", "https://b.com/", "https://a.com/3", "https://c.com/"),
        )
        while not (await service.process_next_chunk(DATE, EMAIL, 2)).completed:
            pass
        final = await service.finalize_daily_report(DATE, EMAIL)
        cached = await service.get_daily_report(DATE, EMAIL)
        return final, cached

    final, cached = asyncio.run(_run())
    assert final == cached
    assert final.total_visits == 5
    assert final.categories == {"News": 5}
    assert [(s.url, s.visits) for s in final.most_visited_sites] == [
        ("https://a.com/", 3), ("https://b.com/", 1), ("https://c.com/", 1),
    ]
    assert final.most_frequent_site.url == "https://a.com/"


def test_get_history(service):
    asyncio.run(service.store_history_with_account(DATE, Account(EMAIL, "Ann"), _history("https://a.com/")))
    record = asyncio.run(service.get_history(DATE, EMAIL))
    assert record.account.name == "Ann"
    assert record.history == _history("https://a.com/")


def test_store_rejects_account_without_email(service):
    with pytest.raises(InvalidArgumentError, match="email"):
        asyncio.run(service.store_history_with_account(DATE, {"name": "Ann"}, []))


def test_get_history_missing(service):
    with pytest.raises(NotFoundError):
        asyncio.run(service.get_history(DATE, EMAIL))


def test_get_daily_report_missing(service):
    with pytest.raises(NotFoundError, match="No daily report found"):
        asyncio.run(service.get_daily_report(DATE, EMAIL))


def test_finalize_without_chunks_returns_neutral_and_caches_nothing(service):
    async def _run():
        await service.store_history_with_account(DATE, Account(EMAIL), _history("https://a.com/"))
        report = await service.finalize_daily_report(DATE, EMAIL)
        status = await service.get_job_status(DATE, EMAIL)
        return report, status

    report, status = asyncio.run(_run())
    assert report == DailyReport.neutral()
    assert status.has_daily_report is False


def test_finalize_mid_job_gives_partial_aggregate(service):
    async def _run():
        await service.store_history_with_account(
            DATE, Account(EMAIL), _history("https://a.com/", "https://b.com/", "https://c.com/")
        )
        await service.process_next_chunk(DATE, EMAIL, 1)
        return await service.finalize_daily_report(DATE, EMAIL)

    assert asyncio.run(_run()).total_visits == 1


def test_finalize_overwrites_previous_report(service):
    async def _run():
        await service.store_history_with_account(DATE, Account(EMAIL), _history("https://a.com/", "https://b.com/"))
        await service.process_next_chunk(DATE, EMAIL, 1)
        await service.finalize_daily_report(DATE, EMAIL)
        await service.process_next_chunk(DATE, EMAIL, 1)
        await service.finalize_daily_report(DATE, EMAIL)
        return await service.get_daily_report(DATE, EMAIL)

    assert asyncio.run(_run()).total_visits == 2


def test_finalize_logs_gap(service, caplog):
    async def _run():
        await service.store_history_with_account(
            DATE, Account(EMAIL), _history("https://a.com/", "https://b.com/", "https://c.com/")
        )
        for _ in range(3):
            await service.process_next_chunk(DATE, EMAIL, 1)
        await service.store.delete("chunk-report:2024-01-01:a@b.com:1")
        return await service.finalize_daily_report(DATE, EMAIL)

    with caplog.at_level(logging.WARNING, logger="history_insights.service"):
        report = asyncio.run(_run())
    assert report.total_visits == 1
    assert "stop at index 1 but progress is 3" in caplog.text


def test_job_status(service):
    async def _run():
        await service.store_history_with_account(DATE, Account(EMAIL), _history("https://a.com/", "https://b.com/"))
        await service.process_next_chunk(DATE, EMAIL, 1)
        return await service.get_job_status(DATE, EMAIL)

    status = asyncio.run(_run())
    assert status.to_dict() == {"nextChunkIndex": 1, "storedChunks": [0], "hasDailyReport": False}
