"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from history_insights.exceptions import InvalidArgumentError

DEFAULT_MODEL = "claude-haiku-4-5-20251001"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"

_STORE_BACKENDS = {"redis", "memory"}
_LOG_FORMATS = {"text", "json"}


@dataclass
class Settings:
    """Runtime configuration for the service and its collaborators."""

    anthropic_api_key: str | None = None
    llm_model: str = DEFAULT_MODEL
    llm_max_retries: int = 3
    classifier_timeout: float = 60.0
    store_backend: str = "redis"
    redis_url: str = DEFAULT_REDIS_URL
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Read settings from the process environment (and ``.env`` when present)."""
        if dotenv:
            load_dotenv()

        backend = os.environ.get("HISTORY_STORE_BACKEND", "redis").strip().lower()
        if backend not in _STORE_BACKENDS:
            raise InvalidArgumentError(
                f"HISTORY_STORE_BACKEND must be one of {sorted(_STORE_BACKENDS)}, got {backend!r}"
            )
        log_format = os.environ.get("LOG_FORMAT", "text").strip().lower()
        if log_format not in _LOG_FORMATS:
            raise InvalidArgumentError(
                f"LOG_FORMAT must be one of {sorted(_LOG_FORMATS)}, got {log_format!r}"
            )

        timeout = _positive_number("CLASSIFIER_TIMEOUT_SECONDS", "60", float)
        retries = _positive_number("LLM_MAX_RETRIES", "3", int)

        return cls(
            anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY") or None,
            llm_model=os.environ.get("DEFAULT_LLM_MODEL", DEFAULT_MODEL),
            llm_max_retries=retries,
            classifier_timeout=timeout,
            store_backend=backend,
            redis_url=os.environ.get("REDIS_URL", DEFAULT_REDIS_URL),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
        )


def _positive_number(name: str, default: str, cast):
    raw = os.environ.get(name, default)
    try:
        value = cast(raw)
    except ValueError as e:
        raise InvalidArgumentError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be positive, got {raw!r}")
    return value
