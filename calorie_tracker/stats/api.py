# -*- coding: utf-8 -*-
"""Stats — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth.security import get_current_user
from .models import StatsBucket, StatsGroup, StatsSummaryResponse
from .storage import get_summary, resolve_range

router = APIRouter(prefix="/api/stats", tags=["Stats"])


@router.get("/summary", response_model=StatsSummaryResponse, summary="Net calories and protein per day or week")
def summary(
    range_: str = Query(default="7", alias="range", description="Days back from today, or ALL"),
    group: StatsGroup = Query(default=StatsGroup.day),
    user: dict = Depends(get_current_user),
):
    try:
        start, end = resolve_range(range_)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid range: {range_}") from exc
    rows = get_summary(user["id"], start=start, end=end, group=group)
    return StatsSummaryResponse(
        start=start,
        end=end,
        group=group,
        stats=[StatsBucket(**r) for r in rows],
    )
