# -*- coding: utf-8 -*-
"""Workouts — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from ..logs.models import DATE_PATTERN
from .models import WorkoutCreateRequest, WorkoutListResponse, WorkoutLog
from .storage import create_workout, delete_workout, list_workouts

router = APIRouter(prefix="/api/workouts", tags=["Workouts"])


@router.post("", response_model=WorkoutLog, summary="Log a lift (1RM estimated when omitted)")
def create_my_workout(request: WorkoutCreateRequest, user: dict = Depends(get_current_user)):
    return WorkoutLog(**create_workout(user["id"], request))


@router.get("", response_model=WorkoutListResponse, summary="List my workout logs")
def list_my_workouts(
    exercise: str | None = Query(default=None, description="Exact exercise name (case-insensitive)"),
    start: str | None = Query(default=None, pattern=DATE_PATTERN),
    end: str | None = Query(default=None, pattern=DATE_PATTERN),
    user: dict = Depends(get_current_user),
):
    rows = list_workouts(user["id"], exercise_name=exercise, start=start, end=end)
    return WorkoutListResponse(workouts=[WorkoutLog(**r) for r in rows])


@router.delete("/{workout_id}", summary="Delete a workout log")
def delete_my_workout(workout_id: str, user: dict = Depends(get_current_user)):
    if not delete_workout(user["id"], workout_id):
        raise HTTPException(status_code=404, detail="Workout not found")
    return {"status": "ok"}
