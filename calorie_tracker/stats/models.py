# -*- coding: utf-8 -*-
"""Stats — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class StatsGroup(str, Enum):
    day = "day"
    week = "week"


class StatsBucket(BaseModel):
    recorded_date: str = Field(..., description="YYYY-MM-DD; the Monday of the week when grouped by week")
    net_calories: float = 0.0
    food_calories: float = 0.0
    exercise_calories: float = 0.0
    total_protein: float = 0.0
    entry_count: int = Field(0, ge=0)


class StatsSummaryResponse(BaseModel):
    start: str
    end: str
    group: StatsGroup
    stats: List[StatsBucket]
