# -*- coding: utf-8 -*-
"""Analyze — free-text food/exercise parsing via the Gemini generateContent API."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..logs.models import ActivityType, Category
from .models import AnalyzedItem, AnalyzeResponse

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
Analyze the following text describing food intake or exercise.
Break it down into individual distinct items.

For each item, extract:
- "type": "FOOD" or "EXERCISE"
- "name": Short description (string). MUST be in Korean (translate if necessary).
- "calories": number (positive integer for food, negative for exercise)
- "protein": number (in grams, 0 if not applicable)
- "category": One of "BREAKFAST", "LUNCH", "DINNER", "SNACK", "MORNING_EXERCISE", "EVENING_EXERCISE", "OTHER" (Infer based on context like "morning", "lunch", or food type)

Output Schema:
{{
  "items": [
    {{ "type": "...", "name": "...", "calories": 0, "protein": 0, "category": "..." }}
  ]
}}

Return ONLY the raw JSON object. No Markdown. No comments.

Text: "{text}"
"""


class GeminiConfigError(RuntimeError):
    """The server is missing configuration needed to call Gemini."""


class GeminiError(RuntimeError):
    """Gemini failed, or returned output that could not be used."""


def build_prompt(text: str) -> str:
    return PROMPT_TEMPLATE.format(text=text)


def strip_code_fences(raw: str) -> str:
    cleaned = raw.replace("```json", "").replace("```JSON", "")
    return cleaned.replace("```", "").strip()


def parse_model_output(raw: str) -> Dict[str, Any]:
    """Parse the model's text reply as a JSON object.

    A bare list is accepted as the item list. Prose around a single object is
    tolerated by falling back to the outermost ``{...}`` span.
    """
    cleaned = strip_code_fences(raw)
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            raise GeminiError("Failed to parse AI response")
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except ValueError as exc:
            raise GeminiError("Failed to parse AI response") from exc

    if isinstance(parsed, list):
        return {"items": parsed}
    if not isinstance(parsed, dict):
        raise GeminiError("Failed to parse AI response")
    return parsed


def extract_text(data: object) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    if not isinstance(first, dict):
        return None
    parts = (first.get("content") or {}).get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) and text else None


def _extract_error_message(data: object) -> Optional[str]:
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
    return None


_NUM_RE = re.compile(r"-?\d+(?:\.\d+)?")


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        m = _NUM_RE.search(value.replace(",", ""))
        return float(m.group(0)) if m else None
    return None


def _coerce_category(value: Any) -> Category:
    if isinstance(value, str):
        try:
            return Category(value.strip().upper())
        except ValueError:
            pass
    return Category.other


def normalize_items(parsed: Dict[str, Any]) -> List[AnalyzedItem]:
    """Best-effort mapping of model output onto AnalyzedItem.

    Exercise calories are always non-positive and food calories non-negative,
    whatever sign the model used.
    """
    raw_items = parsed.get("items")
    if not isinstance(raw_items, list):
        return []

    out: List[AnalyzedItem] = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            continue
        calories = _coerce_float(raw.get("calories")) or 0.0

        type_raw = str(raw.get("type") or "").strip().upper()
        if type_raw in {t.value for t in ActivityType}:
            kind = ActivityType(type_raw)
        else:
            kind = ActivityType.exercise if calories < 0 else ActivityType.food

        calories = abs(calories) if kind is ActivityType.food else -abs(calories)
        protein = max(0.0, _coerce_float(raw.get("protein")) or 0.0)
        name = str(raw.get("name") or "").strip() or "unknown"

        out.append(
            AnalyzedItem(
                type=kind,
                name=name,
                calories=round(calories, 1),
                protein=round(protein, 1),
                category=_coerce_category(raw.get("category")),
            )
        )
    return out


def _generate_url() -> str:
    base = settings.gemini_base_url.rstrip("/")
    return f"{base}/models/{settings.gemini_model}:generateContent"


def generate(prompt: str, *, client: httpx.Client) -> str:
    """Send one prompt and return the first candidate's text."""
    resp = client.post(
        _generate_url(),
        params={"key": settings.gemini_api_key},
        json={"contents": [{"parts": [{"text": prompt}]}]},
    )
    try:
        data = resp.json()
    except ValueError:
        data = None
    if resp.status_code >= 400:
        raise GeminiError(_extract_error_message(data) or f"Gemini API request failed ({resp.status_code})")

    text = extract_text(data)
    if not text:
        raise GeminiError("Failed to get response from Gemini: No text generated")
    return text


def analyze_text(text: str, *, client: httpx.Client | None = None) -> AnalyzeResponse:
    if not settings.gemini_api_key:
        raise GeminiConfigError("Server configuration error: Missing Gemini API Key")

    prompt = build_prompt(text)
    try:
        if client is not None:
            raw = generate(prompt, client=client)
        else:
            with httpx.Client(timeout=settings.gemini_timeout) as own_client:
                raw = generate(prompt, client=own_client)
    except httpx.HTTPError as exc:
        logger.warning("gemini request failed: %s", exc)
        raise GeminiError(f"Gemini API request failed: {exc}") from exc

    try:
        parsed = parse_model_output(raw)
    except GeminiError:
        logger.warning("gemini output parse failed: %r", raw[:200])
        raise
    return AnalyzeResponse(items=normalize_items(parsed))
