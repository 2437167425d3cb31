# -*- coding: utf-8 -*-
"""Logs — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class ActivityType(str, Enum):
    food = "FOOD"
    exercise = "EXERCISE"


class Category(str, Enum):
    breakfast = "BREAKFAST"
    lunch = "LUNCH"
    dinner = "DINNER"
    snack = "SNACK"
    morning_exercise = "MORNING_EXERCISE"
    evening_exercise = "EVENING_EXERCISE"
    other = "OTHER"


class LogCreateRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    type: ActivityType
    content: str = Field(..., min_length=1, max_length=500)
    calories: float
    protein: float = Field(0.0, ge=0)
    recorded_date: str = Field(..., pattern=DATE_PATTERN, description="YYYY-MM-DD")
    category: Optional[Category] = None


class LogCreateResponse(BaseModel):
    success: bool = True
    id: int


class BatchItem(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    type: ActivityType
    name: str = Field(..., min_length=1, max_length=500)
    calories: float
    protein: Optional[float] = Field(None, ge=0)
    category: Optional[Category] = None


class BatchCreateRequest(BaseModel):
    items: Optional[List[BatchItem]] = None
    recorded_date: str = Field(..., pattern=DATE_PATTERN, description="YYYY-MM-DD")


class BatchCreateResponse(BaseModel):
    success: bool = True
    count: int


class LogDeleteRequest(BaseModel):
    id: Optional[int] = None


class ActivityLog(BaseModel):
    id: int
    user_id: int
    type: ActivityType
    content: str
    calories: float
    protein: float
    recorded_date: str
    category: Optional[Category] = None
    created_at: str


class LogListResponse(BaseModel):
    logs: List[ActivityLog]
