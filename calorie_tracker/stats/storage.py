# -*- coding: utf-8 -*-
"""Stats — aggregate queries over activity_logs."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from ..app_db import db_conn
from ..config import settings
from .models import StatsGroup

ALL_RANGE = "ALL"
ALL_START = date(2000, 1, 1)

# Exercise rows may be stored with either sign; they always count against intake.
_BUCKET_EXPR = {
    StatsGroup.day: "recorded_date",
    StatsGroup.week: "date(recorded_date, 'weekday 0', '-6 days')",
}


def _today_utc() -> date:
    return datetime.now(timezone.utc).date()


def resolve_range(range_: str, today: Optional[date] = None) -> Tuple[str, str]:
    """Turn a range token (``"7"``, ``"30"``, ``"ALL"``) into inclusive ISO dates.

    Raises ValueError for anything that is not ``ALL`` or a non-negative integer.
    Ranges reaching before ``ALL_START`` are clamped to it.
    """
    end = today or _today_utc()
    token = (range_ or "").strip()
    if token.upper() == ALL_RANGE:
        start = ALL_START
    else:
        days = int(token)
        if days < 0:
            raise ValueError("range must be non-negative")
        if days >= (end - ALL_START).days:
            start = ALL_START
        else:
            start = end - timedelta(days=days)
    return start.isoformat(), end.isoformat()


def get_summary(user_id: int, *, start: str, end: str, group: StatsGroup = StatsGroup.day) -> List[Dict[str, Any]]:
    bucket = _BUCKET_EXPR[group]
    query = f"""
        SELECT
            {bucket} AS recorded_date,
            SUM(CASE WHEN type = 'FOOD' THEN calories ELSE -ABS(calories) END) AS net_calories,
            SUM(CASE WHEN type = 'FOOD' THEN calories ELSE 0 END) AS food_calories,
            SUM(CASE WHEN type = 'FOOD' THEN 0 ELSE ABS(calories) END) AS exercise_calories,
            SUM(protein) AS total_protein,
            COUNT(*) AS entry_count
        FROM activity_logs
        WHERE user_id = ? AND recorded_date >= ? AND recorded_date <= ?
        GROUP BY 1
        ORDER BY 1 ASC
    """
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(query, (user_id, start, end)).fetchall()
    return [
        {
            "recorded_date": r["recorded_date"],
            "net_calories": round(float(r["net_calories"] or 0.0), 1),
            "food_calories": round(float(r["food_calories"] or 0.0), 1),
            "exercise_calories": round(float(r["exercise_calories"] or 0.0), 1),
            "total_protein": round(float(r["total_protein"] or 0.0), 1),
            "entry_count": int(r["entry_count"] or 0),
        }
        for r in rows
    ]
