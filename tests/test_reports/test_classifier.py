"""Tests for chunk classification and failure absorption."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from history_insights.browser.models import DailyReport, SiteVisit
from history_insights.exceptions import LLMError
from history_insights.reports.classifier import BaseClassifier, LLMClassifier, extract_json_object

GOOD_JSON = (
    '{"totalVisits": 2, "categories": {"News": 2}, '
    '"mostVisitedSites": [{"url": "https://a.com/x", "category": "News", "visits": 2}], '
    '"mostFrequentCategory": {"category": "News", "frequency": 2}, '
    '"mostFrequentSite": {"url": "https://a.com/x", "category": "News", "visits": 2}}'
)

CHUNK = [
    {"url": "https://a.com/x", "title": "Headline"},
    {"url": "https://a.com/y"},
]


def _llm(text=None, side_effect=None):
    llm = MagicMock()
    if side_effect is not None:
        llm.generate = AsyncMock(side_effect=side_effect)
    else:
        llm.generate = AsyncMock(return_value={"text": text})
    return llm


def test_base_classifier_is_abstract():
    with pytest.raises(TypeError):
        BaseClassifier()


def test_extract_json_with_surrounding_prose():
    text = f"Sure! Here is the report:\n{GOOD_JSON}\nLet me know {{if}} you need more."
    assert extract_json_object(text)["totalVisits"] == 2


def test_extract_json_ignores_braces_in_strings():
    text = 'Result: {"categories": {"a}b": 1}, "note": "{"} trailing }'
    assert extract_json_object(text) == {"categories": {"a}b": 1}, "note": "{"}


def test_extract_json_skips_unparseable_candidates():
    text = "{not json} then {\"totalVisits\": 1}"
    assert extract_json_object(text) == {"totalVisits": 1}


def test_extract_json_none_when_absent():
    assert extract_json_object("no json here") is None
    assert extract_json_object("{ unbalanced") is None
    assert extract_json_object("[1, 2, 3]") is None


def test_llm_classifier_parses_report():
    llm = _llm(text=f"```json\n{GOOD_JSON}\n```")
    report = asyncio.run(LLMClassifier(llm).classify(CHUNK))

    assert report.total_visits == 2
    assert report.most_visited_sites == [SiteVisit("https://a.com/x", "News", 2)]
    prompt = llm.generate.call_args.args[1]
    assert "https://a.com/x - Headline" in prompt
    assert "https://a.com/y - " in prompt


@pytest.mark.parametrize("text", [
    "I cannot help with that.",
    '{"totalVisits": "lots"}',
    '{"categories": [1, 2]}',
    "",
])
def test_bad_responses_become_neutral(text):
    report = asyncio.run(LLMClassifier(_llm(text=text)).classify(CHUNK))
    assert report == DailyReport.neutral()


def test_llm_error_becomes_neutral():
    llm = _llm(side_effect=LLMError("Claude API error"))
    assert asyncio.run(LLMClassifier(llm).classify(CHUNK)) == DailyReport.neutral()


def test_timeout_becomes_neutral():
    async def _slow(*args, **kwargs):
        await asyncio.sleep(5)
        return {"text": GOOD_JSON}

    llm = _llm(side_effect=_slow)
    report = asyncio.run(LLMClassifier(llm, timeout=0.01).classify(CHUNK))
    assert report == DailyReport.neutral()


def test_unexpected_exception_becomes_neutral():
    class Exploding(BaseClassifier):
        async def _classify(self, chunk):
            raise RuntimeError("network down")

    assert asyncio.run(Exploding().classify(CHUNK)) == DailyReport.neutral()
