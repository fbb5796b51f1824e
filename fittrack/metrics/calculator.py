# -*- coding: utf-8 -*-
"""
Fitness metrics calculator

Derived numbers shown on the dashboard: BMI, BMR/TDEE, calorie target,
progress towards the target weight and the daily goals. Everything is
recomputed from the stored profile and daily logs on each request.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..profile.height import DEFAULT_HEIGHT_CM, resolve_height
from ..profile.models import ProfileData, to_number_safe
from .models import FitnessMetrics, GoalStatus, TodaySnapshot, WeightPoint

DEFAULT_START_WEIGHT = 70.0
DEFAULT_AGE = 25.0
MIN_CALORIE_TARGET = 1200

ACTIVITY_MULTIPLIERS = {
    "Sedentary": 1.2,
    "Light": 1.375,
    "Moderate": 1.55,
    "Heavy": 1.725,
}


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def parse_weight(value: Any) -> Optional[float]:
    num = to_number_safe(value)
    return num if num is not None and 0 < num < 1000 else None


def bmi_category(bmi: float) -> str:
    if bmi <= 0:
        return "Unknown"
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Healthy"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """
    Body-mass index, one decimal.

    Args:
        weight_kg: body weight in kilograms
        height_cm: height in centimeters

    Returns:
        float: kg/m², 0 when the height is not positive
    """
    meters = height_cm / 100
    if meters <= 0:
        return 0.0
    return _round_half_up(weight_kg / (meters ** 2), 1)


def activity_multiplier(activity: Optional[str]) -> float:
    return ACTIVITY_MULTIPLIERS.get(activity or "", 1.2)


def calculate_bmr(*, weight_kg: float, height_cm: float, age: float, sex: Optional[str]) -> int:
    """Mifflin-St Jeor resting energy, kcal/day."""
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    bmr = bmr - 161 if (sex or "").lower() == "female" else bmr + 5
    return max(0, int(_round_half_up(bmr)))


def calorie_target(tdee: int, fitness_goal: str) -> Tuple[int, str]:
    goal = fitness_goal.lower()
    if "loss" in goal:
        return max(MIN_CALORIE_TARGET, tdee - 500), "Deficit target (~0.5kg/week loss)."
    if "gain" in goal:
        return tdee + 500, "Surplus target to build mass."
    return tdee, "Maintain current intake."


def progress_percent(start: float, current: float, target: float) -> int:
    total = start - target
    percent = 0.0
    if total != 0:
        if total > 0:
            percent = (start - current) / total * 100
        else:
            percent = (current - start) / (target - start) * 100
    return int(_round_half_up(min(max(percent, 0.0), 100.0)))


def _weighted_history(logs: Iterable[Mapping[str, Any]]) -> List[WeightPoint]:
    points = []
    for log in logs:
        weight = parse_weight(log.get("weight_kg"))
        if weight is not None and log.get("date"):
            points.append(WeightPoint(date=str(log["date"]), weight_kg=weight))
    return sorted(points, key=lambda p: p.date)


def _start_date(data: ProfileData, fallback: Optional[str]) -> Optional[str]:
    extra = data.model_extra or {}
    for key in ("createdAt", "startDate"):
        value = extra.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return fallback


def compute_metrics(
    data: ProfileData,
    logs: Iterable[Mapping[str, Any]],
    *,
    today: str,
    profile_created_at: Optional[str] = None,
) -> FitnessMetrics:
    logs = list(logs)
    start_weight = data.weight_kg if data.weight_kg is not None else DEFAULT_START_WEIGHT
    start_date = _start_date(data, profile_created_at)

    history = _weighted_history(logs)
    today_log = next((log for log in logs if log.get("date") == today), None)
    today_weight = parse_weight(today_log.get("weight_kg")) if today_log else None

    current_weight, source, current_date = start_weight, "profile", start_date
    if today_weight is not None:
        current_weight, source, current_date = today_weight, "today", today
    elif history:
        current_weight, source, current_date = history[-1].weight_kg, "lastLog", history[-1].date

    resolved = resolve_height(data)
    height_cm = float(resolved.centimeters) if resolved.centimeters else DEFAULT_HEIGHT_CM
    age = max(1.0, data.age if data.age is not None else DEFAULT_AGE)

    bmi = calculate_bmi(current_weight, height_cm)
    target_weight = data.target_weight if data.target_weight is not None else start_weight

    multiplier = activity_multiplier(data.daily_activity)
    bmr = calculate_bmr(weight_kg=current_weight, height_cm=height_cm, age=age, sex=data.sex)
    tdee = max(0, int(_round_half_up(bmr * multiplier)))
    goal = (data.fitness_goal or "").lower()
    target_kcal, advice = calorie_target(tdee, goal)

    return FitnessMetrics(
        start_weight=start_weight,
        start_date=start_date,
        current_weight=current_weight,
        current_weight_source=source,
        current_weight_date=current_date,
        weight_history=history,
        height_cm=height_cm,
        bmi=bmi,
        bmi_label=bmi_category(bmi),
        target_weight=target_weight,
        lost_so_far=start_weight - current_weight,
        progress_percent=progress_percent(start_weight, current_weight, target_weight),
        activity_multiplier=multiplier,
        bmr=bmr,
        tdee=tdee,
        calorie_target=target_kcal,
        advice_text=advice,
        hydration_goal_l=_round_half_up(current_weight * 0.035, 1),
        step_goal=8000 if data.daily_activity == "Sedentary" else 10000,
        fitness_goal=goal,
    )


def today_snapshot(today_log: Optional[Mapping[str, Any]]) -> TodaySnapshot:
    if not today_log:
        return TodaySnapshot()
    exercises = today_log.get("exercises")
    return TodaySnapshot(
        weight=parse_weight(today_log.get("weight_kg")),
        steps=to_number_safe(today_log.get("steps")) or 0,
        calories_burned=to_number_safe(today_log.get("calories_burned")) or 0,
        water=to_number_safe(today_log.get("water_liters")) or 0,
        exercises=exercises if isinstance(exercises, list) else [],
        has_data=True,
    )


def goal_status(metrics: FitnessMetrics, snapshot: TodaySnapshot) -> GoalStatus:
    steps_met = snapshot.steps >= metrics.step_goal
    # Small tolerance for float water totals.
    water_met = snapshot.water >= metrics.hydration_goal_l - 0.1
    if "loss" in metrics.fitness_goal:
        calories_met = snapshot.calories_burned >= metrics.tdee * 0.3
    else:
        calories_met = snapshot.calories_burned >= 200
    return GoalStatus(
        steps_met=steps_met,
        water_met=water_met,
        calories_met=calories_met,
        all_met=steps_met and water_met and calories_met,
    )


def summarize(
    data: ProfileData,
    logs: Iterable[Mapping[str, Any]],
    *,
    today: str,
    profile_created_at: Optional[str] = None,
) -> Dict[str, Any]:
    logs = list(logs)
    metrics = compute_metrics(data, logs, today=today, profile_created_at=profile_created_at)
    snapshot = today_snapshot(next((log for log in logs if log.get("date") == today), None))
    return {
        "today": today,
        "metrics": metrics,
        "today_data": snapshot,
        "goal_status": goal_status(metrics, snapshot),
    }
