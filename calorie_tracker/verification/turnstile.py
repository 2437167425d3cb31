# -*- coding: utf-8 -*-
"""Verification — Cloudflare Turnstile token check."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


class TurnstileConfigError(RuntimeError):
    """No Turnstile secret is configured."""


class TurnstileError(RuntimeError):
    """siteverify could not be reached or returned garbage."""


@dataclass(frozen=True)
class TurnstileResult:
    success: bool
    error_codes: List[str] = field(default_factory=list)


def verify_token(token: str, remote_ip: Optional[str] = None, *, client: httpx.Client | None = None) -> TurnstileResult:
    if not settings.turnstile_secret_key:
        raise TurnstileConfigError("Server configuration error: Missing Turnstile secret")

    form = {"secret": settings.turnstile_secret_key, "response": token}
    if remote_ip:
        form["remoteip"] = remote_ip

    try:
        if client is not None:
            resp = client.post(settings.turnstile_verify_url, data=form)
        else:
            with httpx.Client(timeout=10) as own_client:
                resp = own_client.post(settings.turnstile_verify_url, data=form)
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("turnstile siteverify failed: %s", exc)
        raise TurnstileError(f"Turnstile verification request failed: {exc}") from exc

    if not isinstance(data, dict):
        raise TurnstileError("Turnstile returned an unexpected payload")
    codes = data.get("error-codes") or []
    return TurnstileResult(
        success=bool(data.get("success")),
        error_codes=[str(c) for c in codes] if isinstance(codes, list) else [str(codes)],
    )
