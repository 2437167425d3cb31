# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from ..config import settings
from .models import MeResponse, UserPublic
from .oauth import OAuthError, build_authorize_url, complete_login
from .security import TOKEN_COOKIE_NAME, create_access_token, get_optional_user
from .storage import upsert_google_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])

STATE_COOKIE_NAME = "oauth_state"
_LOCAL_HOSTS = {"localhost", "127.0.0.1"}

logger = logging.getLogger(__name__)


def _user_public(row: dict) -> UserPublic:
    return UserPublic(
        id=row["id"],
        email=row["email"],
        name=row.get("name"),
        picture=row.get("picture"),
        role=row.get("role") or "USER",
    )


def cookie_secure_for(request: Request) -> bool:
    if settings.cookie_secure is not None:
        return settings.cookie_secure
    return (request.url.hostname or "") not in _LOCAL_HOSTS


def _set_auth_cookie(resp: Response, token: str, *, secure: bool) -> None:
    max_age = int(settings.token_ttl_days) * 24 * 60 * 60
    resp.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        httponly=True,
        secure=secure,
        samesite="lax",
        max_age=max_age,
        path="/",
    )


@router.get("/login", summary="Redirect to Google sign-in")
def login(request: Request):
    state = secrets.token_urlsafe(24)
    try:
        url = build_authorize_url(state)
    except OAuthError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    resp = RedirectResponse(url, status_code=302)
    resp.set_cookie(
        STATE_COOKIE_NAME,
        state,
        httponly=True,
        secure=cookie_secure_for(request),
        samesite="lax",
        max_age=600,
        path="/api/auth",
    )
    return resp


@router.get("/callback", summary="Google OAuth callback")
def callback(
    request: Request,
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
):
    if not code:
        raise HTTPException(status_code=400, detail="Missing code")
    expected_state = request.cookies.get(STATE_COOKIE_NAME)
    # Once /login has issued a state cookie, the callback must echo it back.
    if expected_state and not (state and secrets.compare_digest(expected_state.encode(), state.encode())):
        raise HTTPException(status_code=400, detail="OAuth state mismatch")

    try:
        profile = complete_login(code)
    except OAuthError as exc:
        if exc.payload is not None:
            return JSONResponse(status_code=400, content=exc.payload)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    user, created = upsert_google_user(profile)
    logger.info("%s user %s signed in (role=%s)", "new" if created else "returning", user["id"], user["role"])

    token = create_access_token(user)
    resp = RedirectResponse(settings.post_login_redirect, status_code=302)
    _set_auth_cookie(resp, token, secure=cookie_secure_for(request))
    resp.delete_cookie(STATE_COOKIE_NAME, path="/api/auth")
    return resp


@router.get("/me", response_model=MeResponse, summary="Get current user")
def me(request: Request):
    user = get_optional_user(request)
    return MeResponse(user=_user_public(user) if user else None)


@router.post("/logout", summary="Logout")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}
