# -*- coding: utf-8 -*-
"""Profile — API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..auth.security import get_current_user
from .height import resolve_height
from .models import ProfileResponse, ProfileUpdateRequest
from .reader import read_profile_data
from .storage import get_or_create_profile, update_profile

router = APIRouter(prefix="/api/profile", tags=["Profile"])


def _profile_response(profile: Dict[str, Any]) -> ProfileResponse:
    data = read_profile_data(profile)
    return ProfileResponse(
        id=profile["id"],
        username=profile.get("username"),
        email=profile.get("email"),
        data=data.model_dump(by_alias=True),
        height=resolve_height(data),
        created_at=profile.get("created_at"),
        updated_at=profile.get("updated_at"),
    )


@router.get("", response_model=ProfileResponse, summary="Get (or create) my profile")
def get_my_profile(user: dict = Depends(get_current_user)):
    return _profile_response(get_or_create_profile(user["id"], email=user.get("email")))


@router.put("", response_model=ProfileResponse, summary="Update my profile (data keys are merged)")
def update_my_profile(request: ProfileUpdateRequest, user: dict = Depends(get_current_user)):
    get_or_create_profile(user["id"], email=user.get("email"))
    profile = update_profile(user["id"], username=request.username, data=request.data)
    return _profile_response(profile)
