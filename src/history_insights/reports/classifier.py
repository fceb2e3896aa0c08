"""Chunk classifiers.

``BaseClassifier.classify`` never raises: any failure, including a timeout,
is logged and replaced by the neutral report so a bad chunk cannot stall a
job.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Sequence

from history_insights.browser.models import DailyReport
from history_insights.browser.parser import item_url_title
from history_insights.exceptions import ClassifierError
from history_insights.llm.client import AsyncLLMClient
from history_insights.reports.prompts import SYSTEM_PROMPT, build_user_prompt

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class BaseClassifier(ABC):
    """Turns one chunk of raw history items into a report."""

    def __init__(self, timeout: float | None = DEFAULT_TIMEOUT):
        self.timeout = timeout

    @abstractmethod
    async def _classify(self, chunk: Sequence[Any]) -> DailyReport:
        """Classify a chunk; may raise on any failure."""
        ...

    async def classify(self, chunk: Sequence[Any]) -> DailyReport:
        try:
            return await asyncio.wait_for(self._classify(chunk), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Classifier timed out after %ss on %d items; using neutral report",
                self.timeout, len(chunk),
            )
        except Exception as e:
            logger.warning("Error analyzing chunk of %d items: %s; using neutral report", len(chunk), e)
        return DailyReport.neutral()


class LLMClassifier(BaseClassifier):
    """Classify a chunk by asking Claude for a report JSON object."""

    def __init__(
        self,
        llm: AsyncLLMClient,
        timeout: float | None = DEFAULT_TIMEOUT,
        max_tokens: int = 1024,
        temperature: float = 1.0,
    ):
        super().__init__(timeout=timeout)
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def _classify(self, chunk: Sequence[Any]) -> DailyReport:
        lines = []
        for item in chunk:
            url, title = item_url_title(item)
            lines.append(f"{url} - {title}")

        response = await self.llm.generate(
            SYSTEM_PROMPT,
            build_user_prompt(lines),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        text = response.get("text", "")
        logger.debug("Raw classifier response: %s", text)

        payload = extract_json_object(text)
        if payload is None:
            raise ClassifierError("No valid JSON object found in classifier response")
        try:
            return DailyReport.from_dict(payload)
        except ValueError as e:
            raise ClassifierError(f"Classifier response has the wrong shape: {e}") from e


def extract_json_object(text: str) -> dict | None:
    """Return the first balanced ``{...}`` substring of ``text`` that parses as a JSON object.

    Braces inside JSON strings are ignored while matching.
    """
    start = text.find("{")
    while start != -1:
        end = _matching_brace(text, start)
        value = None
        if end is not None:
            try:
                value = json.loads(text[start : end + 1])
            except ValueError:
                pass
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def _matching_brace(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None
