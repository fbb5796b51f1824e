# -*- coding: utf-8 -*-
"""Daily logs — DB storage helpers (one row per user and date)."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..app_db import db_conn
from ..config import settings

_FIELDS = ("weight_kg", "steps", "calories_burned", "water_liters")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _row_to_log(row: Dict[str, Any]) -> Dict[str, Any]:
    try:
        exercises = json.loads(row.get("exercises_json") or "[]")
    except ValueError:
        exercises = []
    out = {k: row.get(k) for k in _FIELDS}
    out["date"] = row["date"]
    out["exercises"] = exercises if isinstance(exercises, list) else []
    out["updated_at"] = row.get("updated_at")
    return out


def get_log(user_id: str, date: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM daily_logs WHERE user_id = ? AND date = ?",
            (user_id, date),
        ).fetchone()
        return _row_to_log(dict(row)) if row else None


def list_logs(user_id: str, *, start: Optional[str] = None, end: Optional[str] = None) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM daily_logs WHERE user_id = ?"
    params: List[Any] = [user_id]
    if start:
        sql += " AND date >= ?"
        params.append(start)
    if end:
        sql += " AND date <= ?"
        params.append(end)
    sql += " ORDER BY date ASC"
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(sql, params).fetchall()
    return [_row_to_log(dict(r)) for r in rows]


def upsert_log(user_id: str, date: str, updates: Dict[str, Any]) -> Dict[str, Any]:
    """Merge `updates` into the stored log for `date`, creating it if needed."""
    merged = get_log(user_id, date) or {"exercises": []}
    for key in _FIELDS + ("exercises",):
        if key in updates:
            merged[key] = updates[key]
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO daily_logs (
                user_id, date, weight_kg, steps, calories_burned, water_liters, exercises_json, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, date) DO UPDATE SET
                weight_kg = excluded.weight_kg,
                steps = excluded.steps,
                calories_burned = excluded.calories_burned,
                water_liters = excluded.water_liters,
                exercises_json = excluded.exercises_json,
                updated_at = excluded.updated_at
            """,
            (
                user_id,
                date,
                merged.get("weight_kg"),
                merged.get("steps"),
                merged.get("calories_burned"),
                merged.get("water_liters"),
                json.dumps(merged.get("exercises") or [], ensure_ascii=False),
                now,
            ),
        )
    return get_log(user_id, date) or {}
