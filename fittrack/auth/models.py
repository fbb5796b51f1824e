# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, field_validator


def _clean_email(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=8, max_length=128)
    username: Optional[str] = Field(None, max_length=80, description="Display name; blank means the default")

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: Any) -> Any:
        return _clean_email(value)

    @field_validator("username", mode="before")
    @classmethod
    def _blank_username_is_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: Any) -> Any:
        return _clean_email(value)


class UserPublic(BaseModel):
    id: str
    email: str
    username: Optional[str] = None
    created_at: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserPublic":
        return cls(id=row["id"], email=row["email"], username=row.get("username"), created_at=row["created_at"])


class AuthResponse(BaseModel):
    user: UserPublic
    token: str
