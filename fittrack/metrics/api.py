# -*- coding: utf-8 -*-
"""Metrics — API endpoints."""

from __future__ import annotations

from datetime import date as date_cls

from fastapi import APIRouter, Depends, Query

from ..auth.security import get_current_user
from ..logs.models import DATE_PATTERN
from ..logs.storage import list_logs
from ..profile.reader import read_profile_data
from ..profile.storage import get_or_create_profile
from .calculator import summarize
from .models import MetricsSummaryResponse

router = APIRouter(prefix="/api/metrics", tags=["Metrics"])


@router.get("/summary", response_model=MetricsSummaryResponse, summary="Derived fitness metrics for today")
def metrics_summary(
    today: str | None = Query(default=None, pattern=DATE_PATTERN, description="YYYY-MM-DD (defaults to server date)"),
    user: dict = Depends(get_current_user),
):
    profile = get_or_create_profile(user["id"], email=user.get("email"))
    day = today or date_cls.today().isoformat()
    summary = summarize(
        read_profile_data(profile),
        list_logs(user["id"]),
        today=day,
        profile_created_at=profile.get("created_at"),
    )
    return MetricsSummaryResponse(**summary)
