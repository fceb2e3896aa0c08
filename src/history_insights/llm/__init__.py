"""LLM client wrapper used by the chunk classifier."""

from history_insights.llm.client import AsyncLLMClient

__all__ = ["AsyncLLMClient"]
