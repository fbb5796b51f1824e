# -*- coding: utf-8 -*-
"""Workouts — DB storage helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from .models import WorkoutCreateRequest, estimate_one_rep_max


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def create_workout(user_id: str, request: WorkoutCreateRequest) -> Dict[str, Any]:
    workout_id = str(uuid4())
    now = _utc_now()
    one_rep_max = request.one_rep_max
    if one_rep_max is None:
        one_rep_max = estimate_one_rep_max(request.weight_kg, request.reps)
    name = request.exercise_name.strip()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO workout_logs (
                id, user_id, date, exercise_name, sets, reps, weight_kg, one_rep_max, notes, created_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                workout_id,
                user_id,
                request.date,
                name,
                request.sets,
                request.reps,
                request.weight_kg,
                one_rep_max,
                request.notes,
                now,
            ),
        )
    return {
        "id": workout_id,
        "date": request.date,
        "exercise_name": name,
        "sets": request.sets,
        "reps": request.reps,
        "weight_kg": request.weight_kg,
        "one_rep_max": one_rep_max,
        "notes": request.notes,
        "created_at": now,
    }


def list_workouts(
    user_id: str,
    *,
    exercise_name: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM workout_logs WHERE user_id = ?"
    params: List[Any] = [user_id]
    if exercise_name:
        sql += " AND lower(exercise_name) = lower(?)"
        params.append(exercise_name.strip())
    if start:
        sql += " AND date >= ?"
        params.append(start)
    if end:
        sql += " AND date <= ?"
        params.append(end)
    sql += " ORDER BY date ASC, created_at ASC"
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
    out = []
    for r in rows:
        d = dict(r)
        d.pop("user_id", None)
        out.append(d)
    return out


def delete_workout(user_id: str, workout_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute(
            "DELETE FROM workout_logs WHERE id = ? AND user_id = ?",
            (workout_id, user_id),
        )
        return cur.rowcount > 0
