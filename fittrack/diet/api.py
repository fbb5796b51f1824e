# -*- coding: utf-8 -*-
"""Diet — API endpoints for the weekly diet plan."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Set

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user
from ..profile.storage import get_or_create_profile
from .generator import DietPlanGenerationError, ProfileInputError, generate_diet_plan
from .models import DietPlanGenerateResponse, PlanLoadResult
from .storage import delete_plan, load_plan, save_plan

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/diet", tags=["Diet"])

# Users with a generation in flight (in-process only).
_in_flight: Set[str] = set()
_in_flight_lock = threading.Lock()


@contextmanager
def _generation_slot(user_id: str) -> Iterator[None]:
    with _in_flight_lock:
        if user_id in _in_flight:
            raise HTTPException(status_code=409, detail="A diet plan is already being generated")
        _in_flight.add(user_id)
    try:
        yield
    finally:
        with _in_flight_lock:
            _in_flight.discard(user_id)


@router.get("/plan", response_model=PlanLoadResult, summary="Load my saved diet plan")
def get_plan(user: dict = Depends(get_current_user)):
    return load_plan(user["id"])


@router.post("/plan/generate", response_model=DietPlanGenerateResponse, summary="Generate and save a new 7-day plan")
def generate_plan(user: dict = Depends(get_current_user)):
    profile = get_or_create_profile(user["id"], email=user.get("email"))
    with _generation_slot(user["id"]):
        try:
            result = generate_diet_plan(profile)
        except ProfileInputError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except DietPlanGenerationError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc

    try:
        saved_at = save_plan(user["id"], result.plan)
    except ValueError as exc:
        logger.error("normalized diet plan failed validation: %s", exc)
        raise HTTPException(status_code=500, detail=f"Failed to save diet plan: {exc}") from exc

    return DietPlanGenerateResponse(
        plan=result.plan,
        fallback=result.is_fallback,
        fallback_reason=getattr(result, "reason", None),
        saved_at=saved_at,
    )


@router.delete("/plan", summary="Delete my saved diet plan")
def reset_plan(user: dict = Depends(get_current_user)):
    deleted = delete_plan(user["id"])
    return {"status": "ok", "deleted": deleted}
