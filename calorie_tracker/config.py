from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional


def _env_flag(name: str) -> Optional[bool]:
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return None
    return raw in {"1", "true", "True", "yes"}


class Settings:
    """Centralized configuration for the tracker backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        self.data_root: Path = Path(
            os.environ.get("TRACKER_DATA_ROOT") or (repo_root / "data")
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("TRACKER_DB_PATH") or (self.data_root / "tracker.db")
        ).expanduser()

        # ---- Session ----
        # In production you MUST set JWT_SECRET. The dev fallback keeps local demos easy.
        self.jwt_secret: str = os.environ.get("JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("TRACKER_TOKEN_TTL_DAYS") or "7")
        # None means "decide per request": secure unless served from localhost.
        self.cookie_secure: Optional[bool] = _env_flag("TRACKER_COOKIE_SECURE")
        self.post_login_redirect: str = os.environ.get("TRACKER_POST_LOGIN_REDIRECT") or "/dashboard"
        self.admin_emails: List[str] = [
            e.strip().lower()
            for e in (os.environ.get("TRACKER_ADMIN_EMAILS") or "").split(",")
            if e.strip()
        ]

        # ---- Google OAuth ----
        self.google_client_id: str | None = os.environ.get("GOOGLE_CLIENT_ID")
        self.google_client_secret: str | None = os.environ.get("GOOGLE_CLIENT_SECRET")
        self.google_redirect_uri: str = (
            os.environ.get("GOOGLE_REDIRECT_URI") or "http://localhost:5173/api/auth/callback"
        )
        self.google_timeout: float = float(os.environ.get("GOOGLE_TIMEOUT") or "15")

        # ---- Gemini ----
        self.gemini_api_key: str | None = os.environ.get("GEMINI_API_KEY")
        self.gemini_base_url: str = os.environ.get(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.gemini_model: str = os.environ.get("GEMINI_MODEL", "gemini-flash-latest")
        self.gemini_timeout: float = float(os.environ.get("GEMINI_TIMEOUT", "30"))

        # ---- Human verification ----
        self.turnstile_secret_key: str | None = os.environ.get("TURNSTILE_SECRET_KEY")
        self.turnstile_verify_url: str = os.environ.get(
            "TURNSTILE_VERIFY_URL", "https://challenges.cloudflare.com/turnstile/v0/siteverify"
        )

        self.log_level: str = (os.environ.get("TRACKER_LOG_LEVEL") or "INFO").upper()

        cors = os.environ.get("TRACKER_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()
