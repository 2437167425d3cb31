# -*- coding: utf-8 -*-
"""Analyze — Pydantic models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from ..logs.models import ActivityType, Category


class AnalyzeRequest(BaseModel):
    text: str = Field("", max_length=4000)


class AnalyzedItem(BaseModel):
    type: ActivityType
    name: str = Field(..., min_length=1)
    calories: float = Field(0.0, description="Positive for food, negative for exercise")
    protein: float = Field(0.0, ge=0)
    category: Category = Category.other


class AnalyzeResponse(BaseModel):
    items: List[AnalyzedItem] = []
