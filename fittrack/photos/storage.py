# -*- coding: utf-8 -*-
"""Photos — progress photos on disk + one SQLite row per user and date."""

from __future__ import annotations

import logging
import re
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from fastapi import HTTPException, UploadFile

from ..app_db import db_conn
from ..config import settings
from .models import PhotoSlot

logger = logging.getLogger(__name__)

SLOTS = tuple(s.value for s in PhotoSlot)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _user_photos_root(user_id: str) -> Path:
    return settings.data_root / "users" / user_id / "photos"


def _safe_suffix(filename: str) -> str:
    suffix = Path(filename or "").suffix.lower()
    if not suffix or len(suffix) > 12:
        return ""
    if not re.fullmatch(r"\.[a-z0-9]+", suffix):
        return ""
    return suffix


def _write_upload(upload: UploadFile, target: Path) -> None:
    max_bytes = int(settings.max_upload_mb) * 1024 * 1024
    size = 0
    try:
        with target.open("wb") as f:
            while True:
                chunk = upload.file.read(1024 * 256)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise HTTPException(status_code=400, detail=f"File too large (> {settings.max_upload_mb} MB)")
                f.write(chunk)
    finally:
        upload.file.close()


def get_photo_row(user_id: str, date: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        row = conn.execute(
            "SELECT * FROM photo_journal WHERE user_id = ? AND date = ?",
            (user_id, date),
        ).fetchone()
        return dict(row) if row else None


def save_photos(user_id: str, date: str, uploads: Mapping[str, UploadFile]) -> Dict[str, Any]:
    """Store the given slots for `date`; slots not uploaded keep their current image."""
    for slot, upload in uploads.items():
        content_type = (upload.content_type or "").lower()
        if not content_type.startswith("image/"):
            raise HTTPException(status_code=400, detail=f"Only image uploads are allowed ({slot}: {content_type or 'unknown'})")

    current = get_photo_row(user_id, date) or {}
    paths = {slot: current.get(f"{slot}_relpath") for slot in SLOTS}

    day_dir = _user_photos_root(user_id) / date
    day_dir.mkdir(parents=True, exist_ok=True)

    # Stage every slot first; stored files are only touched once all uploads are accepted.
    staged: Dict[str, Tuple[Path, Path]] = {}
    try:
        for slot, upload in uploads.items():
            target = day_dir / f"{slot}{_safe_suffix(upload.filename or '')}"
            part = day_dir / f".{slot}.part"
            staged[slot] = (part, target)
            _write_upload(upload, part)
    except Exception:
        for part, _ in staged.values():
            part.unlink(missing_ok=True)
        raise

    for slot, (part, target) in staged.items():
        part.replace(target)
        old = paths.get(slot)
        if old and (settings.data_root / old) != target:
            (settings.data_root / old).unlink(missing_ok=True)
        paths[slot] = str(target.relative_to(settings.data_root))

    now = _utc_now()
    with db_conn(settings.app_db_path) as conn:
        conn.execute(
            """
            INSERT INTO photo_journal (user_id, date, front_relpath, side_relpath, back_relpath, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, date) DO UPDATE SET
                front_relpath = excluded.front_relpath,
                side_relpath = excluded.side_relpath,
                back_relpath = excluded.back_relpath,
                updated_at = excluded.updated_at
            """,
            (user_id, date, paths["front"], paths["side"], paths["back"], now),
        )
    logger.info("stored %s photo(s) for user %s on %s", ",".join(uploads), user_id, date)
    return get_photo_row(user_id, date) or {}


def list_photo_rows(user_id: str) -> List[Dict[str, Any]]:
    with db_conn(settings.app_db_path) as conn:
        rows = conn.execute(
            "SELECT * FROM photo_journal WHERE user_id = ? ORDER BY date DESC",
            (user_id,),
        ).fetchall()
    return [dict(r) for r in rows]


def get_photo_path(row: Mapping[str, Any], slot: str) -> Optional[Path]:
    rel = row.get(f"{slot}_relpath")
    return settings.data_root / rel if rel else None


def delete_photos(user_id: str, date: str) -> bool:
    if not get_photo_row(user_id, date):
        return False
    with db_conn(settings.app_db_path) as conn:
        conn.execute("DELETE FROM photo_journal WHERE user_id = ? AND date = ?", (user_id, date))
    shutil.rmtree(_user_photos_root(user_id) / date, ignore_errors=True)
    return True
