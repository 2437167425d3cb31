# -*- coding: utf-8 -*-
"""Admin — API endpoints (ADMIN role only)."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from ..auth.security import require_admin
from ..config import settings
from .models import AdminStatusResponse, AdminSummaryResponse, ServiceState, ServiceStatus
from .storage import check_database, get_admin_summary

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/summary", response_model=AdminSummaryResponse, summary="Global usage totals and searchable logs")
def summary(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str = Query(default="", max_length=200),
    admin: dict = Depends(require_admin),  # noqa: ARG001
):
    return AdminSummaryResponse.model_validate(get_admin_summary(page=page, limit=limit, search=search))


@router.get("/status", response_model=AdminStatusResponse, summary="Configuration and dependency health")
def status(admin: dict = Depends(require_admin)):  # noqa: ARG001
    if settings.google_client_id and settings.google_client_secret:
        google = ServiceStatus(status=ServiceState.ok, message="Credentials Configured")
    else:
        google = ServiceStatus(status=ServiceState.error, message="Missing Credentials")

    if settings.gemini_api_key:
        gemini = ServiceStatus(status=ServiceState.ok, message="API Key Configured")
    else:
        gemini = ServiceStatus(status=ServiceState.error, message="Missing API Key")

    db_ok, db_message = check_database()
    database = ServiceStatus(status=ServiceState.ok if db_ok else ServiceState.error, message=db_message)

    return AdminStatusResponse(
        google=google,
        gemini=gemini,
        server=ServiceStatus(status=ServiceState.ok, message="API is running"),
        database=database,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
