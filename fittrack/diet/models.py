# -*- coding: utf-8 -*-
"""Diet — Pydantic models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
PLACEHOLDER = "—"


class Weekday(str, Enum):
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"
    saturday = "Saturday"
    sunday = "Sunday"


class DaySchedule(BaseModel):
    day: Weekday
    breakfast: str = Field(PLACEHOLDER, min_length=1)
    lunch: str = Field(PLACEHOLDER, min_length=1)
    snack: str = Field(PLACEHOLDER, min_length=1)
    dinner: str = Field(PLACEHOLDER, min_length=1)


class DietPlan(BaseModel):
    schedule: List[DaySchedule] = Field(..., min_length=7, max_length=7)
    physiological_impact: str = ""


@dataclass(frozen=True)
class PlanOk:
    plan: DietPlan

    @property
    def is_fallback(self) -> bool:
        return False


@dataclass(frozen=True)
class PlanFallback:
    """A usable plan that had to be repaired; `reason` says how."""

    plan: DietPlan
    reason: str

    @property
    def is_fallback(self) -> bool:
        return True


NormalizedPlan = Union[PlanOk, PlanFallback]


class PlanLoadStatus(str, Enum):
    missing = "missing"
    found = "found"
    corrupted = "corrupted"


class PlanLoadResult(BaseModel):
    status: PlanLoadStatus
    plan: Optional[DietPlan] = None
    message: Optional[str] = None
    updated_at: Optional[str] = None


class DietPlanGenerateResponse(BaseModel):
    plan: DietPlan
    fallback: bool = False
    fallback_reason: Optional[str] = None
    saved_at: str
