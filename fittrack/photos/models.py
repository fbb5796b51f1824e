# -*- coding: utf-8 -*-
"""Photos — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class PhotoSlot(str, Enum):
    front = "front"
    side = "side"
    back = "back"


class PhotoEntry(BaseModel):
    date: str
    front: bool = False
    side: bool = False
    back: bool = False
    updated_at: str


class PhotoListResponse(BaseModel):
    count: int
    items: List[PhotoEntry] = Field(default_factory=list)
