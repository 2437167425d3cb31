# -*- coding: utf-8 -*-
"""Analyze — API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user
from .gemini import GeminiConfigError, GeminiError, analyze_text
from .models import AnalyzeRequest, AnalyzeResponse

router = APIRouter(prefix="/api", tags=["Analyze"])


@router.post("/analyze", response_model=AnalyzeResponse, summary="Parse free text into food/exercise items")
def analyze(request: AnalyzeRequest, user: dict = Depends(get_current_user)):  # noqa: ARG001
    text = request.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Missing text input")
    try:
        return analyze_text(text)
    except GeminiConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except GeminiError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
