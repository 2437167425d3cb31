# -*- coding: utf-8 -*-
"""Logs — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from .models import (
    ActivityLog,
    BatchCreateRequest,
    BatchCreateResponse,
    DATE_PATTERN,
    LogCreateRequest,
    LogCreateResponse,
    LogDeleteRequest,
    LogListResponse,
)
from .storage import create_log, create_logs_batch, delete_log, list_logs

router = APIRouter(prefix="/api/logs", tags=["Logs"])


@router.post("/create", response_model=LogCreateResponse, summary="Create an activity log")
def create(request: LogCreateRequest, user: dict = Depends(get_current_user)):
    log_id = create_log(user["id"], request)
    return LogCreateResponse(id=log_id)


@router.get("/list", response_model=LogListResponse, summary="List activity logs")
def list_(
    date: str | None = Query(default=None, pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    user: dict = Depends(get_current_user),
):
    rows = list_logs(user["id"], date=date)
    return LogListResponse(logs=[ActivityLog.model_validate(r) for r in rows])


@router.post("/delete", summary="Delete an activity log")
def delete(request: LogDeleteRequest, user: dict = Depends(get_current_user)):
    if not request.id:
        raise HTTPException(status_code=400, detail="Missing log ID")
    if not delete_log(user["id"], request.id):
        raise HTTPException(status_code=404, detail="Log not found or unauthorized")
    return {"success": True}


@router.post("/batch_create", response_model=BatchCreateResponse, summary="Create several activity logs")
def batch_create(request: BatchCreateRequest, user: dict = Depends(get_current_user)):
    if not request.items:
        raise HTTPException(status_code=400, detail="Invalid items")
    count = create_logs_batch(user["id"], request.items, request.recorded_date)
    return BatchCreateResponse(count=count)
