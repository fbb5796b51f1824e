# -*- coding: utf-8 -*-
"""Profile — DB storage helpers (one row per user)."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..app_db import db_conn
from ..config import settings
from .height import feet_inches_to_cm
from .models import to_number_safe
from .reader import read_profile_data

DEFAULT_USERNAME = "New User"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _default_data() -> Dict[str, Any]:
    return {
        "age": None,
        "email": None,
        "phone": None,
        "weightKg": None,
        "heightFt": None,
        "targetWeight": None,
        "dietType": "balanced",
    }


def _row_to_profile(row: Dict[str, Any]) -> Dict[str, Any]:
    # Keep an unparsable blob as the raw string; read_profile_data copes with both.
    data: Any = {}
    raw = row.get("data_json")
    if raw:
        try:
            data = json.loads(raw)
        except ValueError:
            data = raw
    return {
        "id": row.get("id"),
        "username": row.get("username"),
        "email": row.get("email"),
        "data": data,
        "created_at": row.get("created_at"),
        "updated_at": row.get("updated_at"),
    }


def get_profile(user_id: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
        return _row_to_profile(dict(row)) if row else None


def insert_default_profile(
    conn: sqlite3.Connection,
    user_id: str,
    *,
    username: Optional[str],
    email: Optional[str],
    now: str,
) -> None:
    """Insert the starting profile row on an open connection; an existing row is left alone."""
    data = _default_data()
    data["email"] = email
    conn.execute(
        """
        INSERT OR IGNORE INTO profiles (id, username, email, data_json, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_id, username or DEFAULT_USERNAME, email, json.dumps(data, ensure_ascii=False), now, now),
    )


def create_default_profile(
    user_id: str,
    *,
    username: Optional[str] = None,
    email: Optional[str] = None,
) -> Dict[str, Any]:
    with db_conn(settings.app_db_path) as conn:
        insert_default_profile(conn, user_id, username=username, email=email, now=_utc_now())
        row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return _row_to_profile(dict(row))


def get_or_create_profile(user_id: str, *, email: Optional[str] = None) -> Dict[str, Any]:
    profile = get_profile(user_id)
    if profile:
        return profile
    return create_default_profile(user_id, email=email)


def _sync_height_encodings(data: Dict[str, Any], updates: Dict[str, Any]) -> None:
    """Keep the stored height encodings in step with whichever one was updated."""
    if "heightFt" not in updates and "heightIn" not in updates:
        if to_number_safe(updates.get("heightCm")) is not None:
            # Centimeters become the only height encoding; feet and inches are derived on read.
            for key in ("heightDecimalFt", "heightFt", "heightIn"):
                data.pop(key, None)
        return
    feet = to_number_safe(data.get("heightFt"))
    inches = to_number_safe(data.get("heightIn"))
    if feet is None:
        return
    if inches is None:
        # A lone heightFt must not be shadowed by a stale decimal value.
        data.pop("heightDecimalFt", None)
        data.pop("heightCm", None)
        return
    data["heightDecimalFt"] = round(feet + inches / 12, 4)
    data["heightCm"] = feet_inches_to_cm(feet, inches)


def update_profile(
    user_id: str,
    *,
    username: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    current = get_or_create_profile(user_id)
    merged = read_profile_data(current).model_dump(by_alias=True)
    updates = dict(data or {})
    merged.update(updates)
    _sync_height_encodings(merged, updates)

    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            "UPDATE profiles SET username = ?, data_json = ?, updated_at = ? WHERE id = ?",
            (
                username if username is not None else current.get("username"),
                json.dumps(merged, ensure_ascii=False),
                now,
                user_id,
            ),
        )
        if username is not None:
            conn.execute("UPDATE users SET username = ? WHERE id = ?", (username, user_id))
        row = conn.execute("SELECT * FROM profiles WHERE id = ?", (user_id,)).fetchone()
    return _row_to_profile(dict(row))
