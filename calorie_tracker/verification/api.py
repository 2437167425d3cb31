# -*- coding: utf-8 -*-
"""Verification — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, Field

from ..auth.api import cookie_secure_for
from .gate import VERIFIED_COOKIE_NAME, VERIFIED_COOKIE_VALUE
from .turnstile import TurnstileConfigError, TurnstileError, verify_token

router = APIRouter(prefix="/api", tags=["Verification"])

VERIFIED_COOKIE_MAX_AGE = 24 * 60 * 60


class TurnstileVerifyRequest(BaseModel):
    token: str = Field(..., min_length=1, max_length=4096)


@router.post("/verify-turnstile", summary="Exchange a Turnstile token for the verified cookie")
def verify_turnstile(body: TurnstileVerifyRequest, request: Request, response: Response):
    remote_ip = request.headers.get("cf-connecting-ip") or (request.client.host if request.client else None)
    try:
        result = verify_token(body.token, remote_ip)
    except TurnstileConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except TurnstileError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    if not result.success:
        raise HTTPException(
            status_code=403,
            detail={"message": "Verification failed", "error_codes": result.error_codes},
        )

    response.set_cookie(
        VERIFIED_COOKIE_NAME,
        VERIFIED_COOKIE_VALUE,
        httponly=True,
        secure=cookie_secure_for(request),
        samesite="lax",
        max_age=VERIFIED_COOKIE_MAX_AGE,
        path="/",
    )
    return {"success": True}
