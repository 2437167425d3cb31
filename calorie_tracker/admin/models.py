# -*- coding: utf-8 -*-
"""Admin — Pydantic models.

The admin dashboard consumes camelCase keys, so the summary response
serializes through aliases.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AdminLogRow(BaseModel):
    id: int
    user_id: int
    type: str
    content: str
    calories: float
    protein: float
    recorded_date: str
    category: Optional[str] = None
    created_at: str
    email: str
    name: Optional[str] = None


class AdminSummaryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(..., alias="totalUsers")
    total_logs: int = Field(..., alias="totalLogs")
    filtered_total: int = Field(..., alias="filteredTotal")
    recent_logs: List[AdminLogRow] = Field(default_factory=list, alias="recentLogs")
    page: int
    limit: int
    total_pages: int = Field(..., alias="totalPages")


class ServiceState(str, Enum):
    ok = "OK"
    error = "ERROR"
    unknown = "UNKNOWN"


class ServiceStatus(BaseModel):
    status: ServiceState = ServiceState.unknown
    message: str = ""


class AdminStatusResponse(BaseModel):
    google: ServiceStatus
    gemini: ServiceStatus
    server: ServiceStatus
    database: ServiceStatus
    timestamp: str
