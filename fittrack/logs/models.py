# -*- coding: utf-8 -*-
"""Daily logs — Pydantic models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class DailyLogUpdateRequest(BaseModel):
    """Fields left out of the request keep their stored values."""

    weight_kg: Optional[float] = Field(None, gt=0, lt=1000)
    steps: Optional[int] = Field(None, ge=0)
    calories_burned: Optional[float] = Field(None, ge=0)
    water_liters: Optional[float] = Field(None, ge=0)
    exercises: Optional[List[Dict[str, Any]]] = None


class DailyLog(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    weight_kg: Optional[float] = None
    steps: Optional[int] = None
    calories_burned: Optional[float] = None
    water_liters: Optional[float] = None
    exercises: List[Dict[str, Any]] = Field(default_factory=list)
    updated_at: Optional[str] = None


class DailyLogListResponse(BaseModel):
    logs: List[DailyLog] = Field(default_factory=list)
