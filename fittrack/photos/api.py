# -*- coding: utf-8 -*-
"""Photos — API endpoints."""

from __future__ import annotations

import mimetypes

from fastapi import APIRouter, Depends, File, HTTPException, Path, UploadFile
from fastapi.responses import FileResponse

from ..auth.security import get_current_user
from ..logs.models import DATE_PATTERN
from .models import PhotoEntry, PhotoListResponse, PhotoSlot
from .storage import SLOTS, delete_photos, get_photo_path, get_photo_row, list_photo_rows, save_photos

router = APIRouter(prefix="/api/photos", tags=["Photos"])


def _entry(row: dict) -> PhotoEntry:
    return PhotoEntry(
        date=row["date"],
        updated_at=row["updated_at"],
        **{slot: bool(row.get(f"{slot}_relpath")) for slot in SLOTS},
    )


@router.post("/{date}", response_model=PhotoEntry, summary="Upload front/side/back photos for a date")
def upload_photos(
    date: str = Path(..., pattern=DATE_PATTERN),
    front: UploadFile | None = File(default=None),
    side: UploadFile | None = File(default=None),
    back: UploadFile | None = File(default=None),
    user: dict = Depends(get_current_user),
):
    uploads = {slot: f for slot, f in (("front", front), ("side", side), ("back", back)) if f is not None}
    if not uploads:
        raise HTTPException(status_code=400, detail="Upload at least one of front, side or back")
    return _entry(save_photos(user["id"], date, uploads))


@router.get("", response_model=PhotoListResponse, summary="List my photo journal")
def list_my_photos(user: dict = Depends(get_current_user)):
    items = [_entry(r) for r in list_photo_rows(user["id"])]
    return PhotoListResponse(count=len(items), items=items)


@router.get("/{date}/{slot}", summary="Download one photo")
def download_photo(
    slot: PhotoSlot,
    date: str = Path(..., pattern=DATE_PATTERN),
    user: dict = Depends(get_current_user),
):
    row = get_photo_row(user["id"], date)
    path = get_photo_path(row, slot.value) if row else None
    if path is None:
        raise HTTPException(status_code=404, detail="Photo not found")
    if not path.exists():
        raise HTTPException(status_code=404, detail="File missing on disk")
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FileResponse(str(path), media_type=media_type, filename=path.name)


@router.delete("/{date}", summary="Delete a day's photos")
def delete_my_photos(
    date: str = Path(..., pattern=DATE_PATTERN),
    user: dict = Depends(get_current_user),
):
    if not delete_photos(user["id"], date):
        raise HTTPException(status_code=404, detail="Photos not found")
    return {"status": "ok", "date": date}
