# -*- coding: utf-8 -*-
"""Auth — password hashing, signed session tokens and the current-user dependency.

A session is an HS256 JWT carrying the user id and email. It is accepted
from an ``Authorization: Bearer`` header or from the ``fittrack_token``
cookie, in that order. The user row is re-read on every request, so a
token never outlives its account.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping

from fastapi import HTTPException, Request, Response

from ..config import settings
from .storage import get_user

SESSION_COOKIE = "fittrack_token"

_HASH_SCHEME = "pbkdf2-sha256"
_HASH_ROUNDS = 200_000


def hash_password(password: str) -> str:
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _HASH_ROUNDS)
    return f"{_HASH_SCHEME}${_HASH_ROUNDS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, rounds, salt_hex, digest_hex = stored.split("$")
        if scheme != _HASH_SCHEME:
            return False
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt_hex), int(rounds))
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    email: str
    expires_at: int

    def to_payload(self, issued_at: int) -> Dict[str, Any]:
        return {"sub": self.user_id, "email": self.email, "iat": issued_at, "exp": self.expires_at}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SessionClaims":
        user_id = payload.get("sub")
        expires_at = payload.get("exp")
        if not isinstance(user_id, str) or not user_id or not isinstance(expires_at, int):
            raise ValueError("missing claims")
        return cls(user_id=user_id, email=str(payload.get("email") or ""), expires_at=expires_at)


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _unb64(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _signature(signing_input: str) -> str:
    key = settings.jwt_secret.encode("utf-8")
    return _b64(hmac.new(key, signing_input.encode("ascii"), hashlib.sha256).digest())


_HEADER = _b64(b'{"alg":"HS256","typ":"JWT"}')


def encode_session(claims: SessionClaims, *, issued_at: int) -> str:
    body = _b64(json.dumps(claims.to_payload(issued_at), separators=(",", ":")).encode("utf-8"))
    signing_input = f"{_HEADER}.{body}"
    return f"{signing_input}.{_signature(signing_input)}"


def decode_session(token: str, *, now: int) -> SessionClaims:
    """Verify the signature and expiry; any failure is a 401."""
    try:
        header, body, signature = token.split(".")
        if not hmac.compare_digest(_signature(f"{header}.{body}"), signature):
            raise ValueError("bad signature")
        claims = SessionClaims.from_payload(json.loads(_unb64(body)))
    except (ValueError, TypeError, AttributeError) as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    if claims.expires_at < now:
        raise HTTPException(status_code=401, detail="Token expired")
    return claims


def issue_session(response: Response, user: Mapping[str, Any]) -> str:
    """Sign a token for `user` and set it as the session cookie; returns the token."""
    now = datetime.now(timezone.utc)
    ttl = timedelta(days=int(settings.token_ttl_days))
    claims = SessionClaims(user_id=user["id"], email=user["email"], expires_at=int((now + ttl).timestamp()))
    token = encode_session(claims, issued_at=int(now.timestamp()))
    response.set_cookie(
        SESSION_COOKIE,
        token,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        max_age=int(ttl.total_seconds()),
        path="/",
    )
    return token


def end_session(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE, path="/")


def _request_token(request: Request) -> str:
    auth = request.headers.get("authorization") or ""
    scheme, _, value = auth.partition(" ")
    token = value.strip() if scheme.lower() == "bearer" else request.cookies.get(SESSION_COOKIE, "")
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return token


def authenticate(request: Request) -> Dict[str, Any]:
    """Resolve the request's user row, caching it on `request.state`."""
    user = getattr(request.state, "user", None)
    if user:
        return user
    claims = decode_session(_request_token(request), now=int(datetime.now(timezone.utc).timestamp()))
    user = get_user(claims.user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    request.state.user = user
    return user


def get_current_user(request: Request) -> Dict[str, Any]:
    return authenticate(request)
