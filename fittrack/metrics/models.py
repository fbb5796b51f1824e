# -*- coding: utf-8 -*-
"""Metrics — Pydantic models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class WeightPoint(BaseModel):
    date: str
    weight_kg: float


class FitnessMetrics(BaseModel):
    start_weight: float
    start_date: Optional[str] = None
    current_weight: float
    current_weight_source: str = Field(..., description="today | lastLog | profile")
    current_weight_date: Optional[str] = None
    weight_history: List[WeightPoint] = Field(default_factory=list)
    height_cm: float
    bmi: float
    bmi_label: str
    target_weight: float
    lost_so_far: float
    progress_percent: int
    activity_multiplier: float
    bmr: int
    tdee: int
    calorie_target: int
    advice_text: str
    hydration_goal_l: float
    step_goal: int
    fitness_goal: str = ""


class TodaySnapshot(BaseModel):
    weight: Optional[float] = None
    steps: float = 0
    calories_burned: float = 0
    water: float = 0
    exercises: List[Dict[str, Any]] = Field(default_factory=list)
    has_data: bool = False


class GoalStatus(BaseModel):
    steps_met: bool
    water_met: bool
    calories_met: bool
    all_met: bool


class MetricsSummaryResponse(BaseModel):
    today: str
    metrics: FitnessMetrics
    today_data: TodaySnapshot
    goal_status: GoalStatus
