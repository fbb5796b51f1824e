# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from .models import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from .security import end_session, get_current_user, hash_password, issue_session, verify_password
from .storage import EmailAlreadyRegistered, create_account, find_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, summary="Register a new user")
def register(request: RegisterRequest, response: Response):
    """Create the account with its default profile and start a session."""
    try:
        user = create_account(
            email=request.email,
            password_hash=hash_password(request.password),
            username=request.username,
        )
    except EmailAlreadyRegistered as exc:
        raise HTTPException(status_code=400, detail="Email already registered") from exc
    logger.info("registered user %s", user["id"])
    token = issue_session(response, user)
    return AuthResponse(user=UserPublic.from_row(user), token=token)


@router.post("/login", response_model=AuthResponse, summary="Login")
def login(request: LoginRequest, response: Response):
    user = find_user_by_email(request.email)
    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    token = issue_session(response, user)
    return AuthResponse(user=UserPublic.from_row(user), token=token)


@router.post("/logout", summary="Logout")
def logout(response: Response):
    end_session(response)
    return {"status": "ok"}


@router.get("/me", response_model=UserPublic, summary="Get current user")
def me(user: dict = Depends(get_current_user)):
    return UserPublic.from_row(user)
