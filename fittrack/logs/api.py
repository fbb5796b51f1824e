# -*- coding: utf-8 -*-
"""Daily logs — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ..auth.security import get_current_user
from .models import DATE_PATTERN, DailyLog, DailyLogListResponse, DailyLogUpdateRequest
from .storage import get_log, list_logs, upsert_log

router = APIRouter(prefix="/api/logs", tags=["Logs"])


@router.get("", response_model=DailyLogListResponse, summary="List my daily logs")
def list_my_logs(
    start: str | None = Query(default=None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    end: str | None = Query(default=None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    user: dict = Depends(get_current_user),
):
    return DailyLogListResponse(logs=[DailyLog(**log) for log in list_logs(user["id"], start=start, end=end)])


@router.get("/{date}", response_model=DailyLog, summary="Get one day's log")
def get_my_log(
    date: str = Path(..., pattern=DATE_PATTERN),
    user: dict = Depends(get_current_user),
):
    log = get_log(user["id"], date)
    if not log:
        raise HTTPException(status_code=404, detail="Log not found")
    return DailyLog(**log)


@router.put("/{date}", response_model=DailyLog, summary="Create or merge-update one day's log")
def put_my_log(
    request: DailyLogUpdateRequest,
    date: str = Path(..., pattern=DATE_PATTERN),
    user: dict = Depends(get_current_user),
):
    log = upsert_log(user["id"], date, request.model_dump(exclude_unset=True))
    return DailyLog(**log)
