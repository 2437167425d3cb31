# -*- coding: utf-8 -*-
"""Verification — request gate that requires a human-verified cookie."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

VERIFIED_COOKIE_NAME = "human_verified"
VERIFIED_COOKIE_VALUE = "true"
VERIFY_PAGE = "/verify"

_EXEMPT_PREFIXES = (
    "/api/verify-turnstile",
    "/api/auth/",
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/assets/",
    "/src/",
    "/node_modules/",
    "/@",
)


def is_exempt(path: str) -> bool:
    """Paths reachable without verification: the verify page, auth, static files."""
    if path == VERIFY_PAGE:
        return True
    if path.startswith(_EXEMPT_PREFIXES):
        return True
    # Anything with an extension is a static asset (css, js, png, openapi.json, ...).
    return "." in path


def is_verified(request: Request) -> bool:
    return request.cookies.get(VERIFIED_COOKIE_NAME) == VERIFIED_COOKIE_VALUE


def rejection_for(request: Request) -> Response:
    path = request.url.path
    if path.startswith("/api/"):
        return JSONResponse(
            status_code=403,
            content={"error": "Human verification required", "verificationUrl": VERIFY_PAGE},
        )
    target = path + (f"?{request.url.query}" if request.url.query else "")
    return RedirectResponse(f"{VERIFY_PAGE}?{urlencode({'next': target})}", status_code=302)


def check_request(request: Request) -> Optional[Response]:
    """Return a rejection response, or None when the request may proceed."""
    if is_exempt(request.url.path) or is_verified(request):
        return None
    return rejection_for(request)
