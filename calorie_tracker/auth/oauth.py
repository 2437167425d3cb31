# -*- coding: utf-8 -*-
"""Auth — Google OAuth 2.0 authorization-code flow."""

from __future__ import annotations

import logging
from typing import Any, Dict
from urllib.parse import urlencode

import httpx

from ..config import settings
from .models import GoogleProfile

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_SCOPES = (
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/userinfo.email",
)

logger = logging.getLogger(__name__)


class OAuthError(RuntimeError):
    """Raised when the identity provider rejects a request or is unreachable.

    ``payload`` carries the provider's JSON error body when there is one.
    """

    def __init__(self, message: str, payload: Dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.payload = payload


def build_authorize_url(state: str) -> str:
    if not settings.google_client_id:
        raise OAuthError("Server configuration error: Missing Google client id")
    query = urlencode(
        {
            "client_id": settings.google_client_id,
            "redirect_uri": settings.google_redirect_uri,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "access_type": "online",
            "prompt": "select_account",
            "state": state,
        }
    )
    return f"{GOOGLE_AUTH_URL}?{query}"


def exchange_code(client: httpx.Client, code: str) -> str:
    """Trade an authorization code for an access token."""
    resp = client.post(
        GOOGLE_TOKEN_URL,
        data={
            "code": code,
            "client_id": settings.google_client_id or "",
            "client_secret": settings.google_client_secret or "",
            "redirect_uri": settings.google_redirect_uri,
            "grant_type": "authorization_code",
        },
    )
    try:
        data = resp.json()
    except ValueError as exc:
        raise OAuthError(f"Token endpoint returned non-JSON response ({resp.status_code})") from exc
    if not isinstance(data, dict) or data.get("error"):
        raise OAuthError("Token exchange rejected", payload=data if isinstance(data, dict) else None)
    token = data.get("access_token")
    if not token:
        raise OAuthError("Token exchange returned no access_token", payload=data)
    return str(token)


def fetch_profile(client: httpx.Client, access_token: str) -> GoogleProfile:
    resp = client.get(GOOGLE_USERINFO_URL, headers={"Authorization": f"Bearer {access_token}"})
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict) or not data.get("email"):
        raise OAuthError("Userinfo response has no email")
    return GoogleProfile(email=data["email"], name=data.get("name"), picture=data.get("picture"))


def complete_login(code: str) -> GoogleProfile:
    """Run the server side of the callback: code -> token -> profile."""
    try:
        with httpx.Client(timeout=settings.google_timeout) as client:
            access_token = exchange_code(client, code)
            return fetch_profile(client, access_token)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("google oauth call failed: %s", exc)
        raise OAuthError(f"Google OAuth request failed: {exc}") from exc
