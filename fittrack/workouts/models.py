# -*- coding: utf-8 -*-
"""Workouts — Pydantic models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..logs.models import DATE_PATTERN


def estimate_one_rep_max(weight_kg: float, reps: int) -> float:
    """Epley estimate, one decimal; a single rep is the lift itself."""
    if reps <= 1:
        return round(float(weight_kg), 1)
    return round(weight_kg * (1 + reps / 30), 1)


class WorkoutCreateRequest(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    exercise_name: str = Field(..., min_length=1, max_length=120)
    sets: Optional[int] = Field(None, ge=1)
    reps: int = Field(..., ge=1)
    weight_kg: float = Field(..., ge=0)
    one_rep_max: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = Field(None, max_length=2000)


class WorkoutLog(BaseModel):
    id: str
    date: str
    exercise_name: str
    sets: Optional[int] = None
    reps: int
    weight_kg: float
    one_rep_max: float
    notes: Optional[str] = None
    created_at: str


class WorkoutListResponse(BaseModel):
    workouts: List[WorkoutLog] = Field(default_factory=list)
