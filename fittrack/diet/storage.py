# -*- coding: utf-8 -*-
"""Diet — DB storage helpers (one saved plan per user)."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from .models import DietPlan, PlanLoadResult, PlanLoadStatus
from .normalizer import is_diet_plan

logger = logging.getLogger(__name__)

CORRUPTED_MESSAGE = "Saved diet plan was corrupted and has been removed. Please generate a new one."


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _plan_dict(plan: Any) -> Any:
    if isinstance(plan, DietPlan):
        return plan.model_dump(mode="json")
    return plan


def _coerce_stored_plan(raw: Any) -> Optional[Dict[str, Any]]:
    """Stored plans may be a JSON string or an already-decoded mapping."""
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8", errors="ignore")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    return raw if isinstance(raw, dict) else None


def save_plan(user_id: str, plan: Any) -> str:
    data = _plan_dict(plan)
    if not is_diet_plan(data):
        raise ValueError("Refusing to save a diet plan that is not a 7-day Monday..Sunday schedule.")
    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO diet_plans (user_id, plan_json, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                plan_json = excluded.plan_json,
                updated_at = excluded.updated_at
            """,
            (user_id, json.dumps(data, ensure_ascii=False), now),
        )
    return now


def delete_plan(user_id: str) -> bool:
    with db_conn(settings.app_db_path) as conn:
        cur = conn.execute("DELETE FROM diet_plans WHERE user_id = ?", (user_id,))
        return cur.rowcount > 0


def load_plan(user_id: str) -> PlanLoadResult:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT plan_json, updated_at FROM diet_plans WHERE user_id = ?",
            (user_id,),
        ).fetchone()
    if not row:
        return PlanLoadResult(status=PlanLoadStatus.missing)

    data = _coerce_stored_plan(row["plan_json"])
    if data is None or not is_diet_plan(data):
        logger.warning("stored diet plan for user %s is corrupted; deleting it", user_id)
        delete_plan(user_id)
        return PlanLoadResult(status=PlanLoadStatus.corrupted, message=CORRUPTED_MESSAGE)

    return PlanLoadResult(
        status=PlanLoadStatus.found,
        plan=DietPlan.model_validate(data),
        updated_at=row["updated_at"],
    )
