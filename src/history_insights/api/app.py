"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from history_insights.api.routes import router
from history_insights.config import Settings
from history_insights.exceptions import (
    ConflictError,
    HistoryInsightsError,
    InvalidArgumentError,
    NotFoundError,
    StoreError,
)
from history_insights.kvstore import AsyncKeyValueStore, create_store
from history_insights.llm.client import AsyncLLMClient
from history_insights.logging_config import configure_logging
from history_insights.reports.classifier import BaseClassifier, LLMClassifier
from history_insights.service import HistoryInsightsService

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (NotFoundError, 404),
    (InvalidArgumentError, 400),
    (ConflictError, 409),
    (StoreError, 503),
]


def create_app(
    settings: Settings | None = None,
    store: AsyncKeyValueStore | None = None,
    classifier: BaseClassifier | None = None,
) -> FastAPI:
    """Build the app.

    A ``store`` or ``classifier`` passed in is used as-is and left open on
    shutdown; anything built here from ``settings`` is closed with the app.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or Settings.from_env()
        owned_store = store is None
        kv = store if store is not None else create_store(cfg)
        llm: AsyncLLMClient | None = None
        try:
            clf = classifier
            if clf is None:
                llm = AsyncLLMClient(
                    api_key=cfg.anthropic_api_key,
                    model=cfg.llm_model,
                    max_retries=cfg.llm_max_retries,
                )
                clf = LLMClassifier(llm, timeout=cfg.classifier_timeout)

            app.state.service = HistoryInsightsService(kv, clf)
            logger.info("History insights service started (store=%s)", type(kv).__name__)
            yield
        finally:
            if llm is not None:
                await llm.close()
            if owned_store:
                await kv.close()
            logger.info("History insights service stopped")

    app = FastAPI(title="History Insights", lifespan=lifespan)
    app.include_router(router)

    @app.exception_handler(HistoryInsightsError)
    async def _handle_error(request: Request, exc: HistoryInsightsError) -> JSONResponse:
        status = 500
        for error_type, code in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                status = code
                break
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    return app


def main() -> FastAPI:
    """Entry point for ``uvicorn --factory history_insights.api.app:main``."""
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_format)
    return create_app(settings)
