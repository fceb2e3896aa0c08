"""Async Claude API client with retry logic."""

from __future__ import annotations

import asyncio
import logging
import os

from history_insights.config import DEFAULT_MODEL
from history_insights.exceptions import LLMError

logger = logging.getLogger(__name__)


class AsyncLLMClient:
    """Asynchronous wrapper around the Anthropic SDK."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        max_retries: int = 3,
    ):
        if not api_key and not os.environ.get("ANTHROPIC_API_KEY"):
            raise LLMError(
                "Anthropic API key is required. "
                "Pass it directly or set ANTHROPIC_API_KEY in your environment."
            )
        from anthropic import AsyncAnthropic

        self._client = AsyncAnthropic(api_key=api_key or None)
        self.model = model
        self.max_retries = max_retries

    @property
    def client(self):
        """Access the underlying AsyncAnthropic SDK client for advanced usage."""
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        model: str | None = None,
    ) -> dict:
        """Send a single user message to Claude.

        Returns:
            dict with keys: text, input_tokens, output_tokens, model
        """
        from anthropic import APIError, APITimeoutError, RateLimitError

        use_model = model or self.model
        msgs = [{"role": "user", "content": user_content}]
        for attempt in range(self.max_retries):
            try:
                response = await self._client.messages.create(
                    model=use_model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=system_prompt,
                    messages=msgs,
                )
                text = "".join(
                    block.text for block in response.content if getattr(block, "type", "") == "text"
                )
                return {
                    "text": text,
                    "input_tokens": response.usage.input_tokens,
                    "output_tokens": response.usage.output_tokens,
                    "model": use_model,
                }
            except RateLimitError:
                wait = 2 ** (attempt + 1)
                logger.warning(f"Rate limited, retrying in {wait}s (attempt {attempt + 1})")
                await asyncio.sleep(wait)
            except APITimeoutError:
                wait = 2 ** attempt
                logger.warning(f"API timeout, retrying in {wait}s (attempt {attempt + 1})")
                await asyncio.sleep(wait)
            except APIError as e:
                raise LLMError(f"Claude API error: {e}") from e

        raise LLMError(f"Failed after {self.max_retries} retries")

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.close()
