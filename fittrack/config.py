# -*- coding: utf-8 -*-
"""Configuration — environment-driven settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


class Settings:
    """Centralized configuration for the fittrack backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        # ---- Storage ----
        self.data_root: Path = Path(
            os.environ.get("FITTRACK_DATA_ROOT") or data_root_default
        ).expanduser()
        self.app_db_path: Path = Path(
            os.environ.get("FITTRACK_DB_PATH") or (self.data_root / "fittrack.db")
        ).expanduser()
        self.max_upload_mb: int = int(os.environ.get("FITTRACK_MAX_UPLOAD_MB") or "10")

        # ---- Auth ----
        # In production you MUST set FITTRACK_JWT_SECRET. The dev secret only keeps local demos easy.
        self.jwt_secret: str = os.environ.get("FITTRACK_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("FITTRACK_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = (os.environ.get("FITTRACK_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}

        # ---- Diet plan generation (Gemini) ----
        self.gemini_api_key: str | None = os.environ.get("GEMINI_API_KEY") or None
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.gemini_model: str = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")
        self.gemini_timeout: float = float(os.environ.get("GEMINI_TIMEOUT", "60"))
        self.gemini_temperature: float = float(os.environ.get("GEMINI_TEMPERATURE", "0.35"))
        self.gemini_max_output_tokens: int = int(os.environ.get("GEMINI_MAX_OUTPUT_TOKENS", "2000"))
        if not self.gemini_api_key:
            logger.warning("GEMINI_API_KEY missing; diet plan generation will fail if called.")

        # ---- Server ----
        self.host: str = os.environ.get("FITTRACK_HOST") or "127.0.0.1"
        self.port: int = int(os.environ.get("FITTRACK_PORT") or "8000")

        cors = os.environ.get("FITTRACK_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
