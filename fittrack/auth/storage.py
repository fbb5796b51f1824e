# -*- coding: utf-8 -*-
"""Auth — account rows."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from ..app_db import db_conn
from ..config import settings
from ..profile.storage import DEFAULT_USERNAME, insert_default_profile


class EmailAlreadyRegistered(ValueError):
    pass


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _fetch_user(column: str, value: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(f"SELECT * FROM users WHERE {column} = ?", (value,)).fetchone()
        return dict(row) if row else None


def find_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    return _fetch_user("email", email.strip().lower())


def get_user(user_id: str) -> Optional[Dict[str, Any]]:
    return _fetch_user("id", user_id)


def create_account(*, email: str, password_hash: str, username: Optional[str] = None) -> Dict[str, Any]:
    """Insert the user and its default profile in one transaction.

    Raises EmailAlreadyRegistered when the (normalized) email is taken; nothing
    is written in that case.
    """
    user = {
        "id": str(uuid4()),
        "email": email.strip().lower(),
        "username": username or DEFAULT_USERNAME,
        "password_hash": password_hash,
        "created_at": _utc_now(),
    }
    try:
        with db_conn(settings.app_db_path) as conn:
            conn.execute(
                "INSERT INTO users (id, email, username, password_hash, created_at) VALUES (?, ?, ?, ?, ?)",
                (user["id"], user["email"], user["username"], password_hash, user["created_at"]),
            )
            insert_default_profile(
                conn, user["id"], username=user["username"], email=user["email"], now=user["created_at"]
            )
    except sqlite3.IntegrityError as exc:
        raise EmailAlreadyRegistered(user["email"]) from exc
    return user
