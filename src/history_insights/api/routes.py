"""HTTP routes for history ingestion, chunk processing and reports."""

from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field

from history_insights.browser.models import Account
from history_insights.service import HistoryInsightsService

router = APIRouter(prefix="/browser-history")


class AccountIn(BaseModel):
    email: str = Field(..., min_length=1)
    name: str = ""


class StoreHistoryRequest(BaseModel):
    date: str = Field(..., min_length=1)
    account: AccountIn
    data: List[Any] = Field(default_factory=list)


class ProcessChunkRequest(BaseModel):
    chunkSize: int


def _service(request: Request) -> HistoryInsightsService:
    return request.app.state.service


@router.post("/store")
async def store_history(req: StoreHistoryRequest, request: Request) -> dict:
    account = Account(email=req.account.email, name=req.account.name)
    await _service(request).store_history_with_account(req.date, account, req.data)
    return {"message": "History and account stored successfully"}


@router.get("")
async def get_history(
    request: Request,
    date: str = Query(..., min_length=1),
    email: str = Query(..., min_length=1),
) -> dict:
    record = await _service(request).get_history(date, email)
    return record.to_dict()


@router.post("/process-chunk/{date}/{email}")
async def process_chunk(date: str, email: str, req: ProcessChunkRequest, request: Request) -> dict:
    result = await _service(request).process_next_chunk(date, email, req.chunkSize)
    return {
        "message": "All chunks processed" if result.completed else "Chunk processed successfully",
        **result.to_dict(),
    }


@router.post("/finalize-report/{date}/{email}")
async def finalize_report(date: str, email: str, request: Request) -> dict:
    report = await _service(request).finalize_daily_report(date, email)
    return report.to_dict()


@router.get("/daily-report/{date}/{email}")
async def get_daily_report(date: str, email: str, request: Request) -> dict:
    report = await _service(request).get_daily_report(date, email)
    return report.to_dict()


@router.get("/progress/{date}/{email}")
async def get_progress(date: str, email: str, request: Request) -> dict:
    status = await _service(request).get_job_status(date, email)
    return status.to_dict()
