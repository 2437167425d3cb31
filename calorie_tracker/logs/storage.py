# -*- coding: utf-8 -*-
"""Logs — DB storage helpers. Every statement is scoped by user_id."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..app_db import db_conn
from ..config import settings
from .models import BatchItem, LogCreateRequest

_INSERT_SQL = (
    "INSERT INTO activity_logs (user_id, type, content, calories, protein, recorded_date, category) "
    "VALUES (?, ?, ?, ?, ?, ?, ?)"
)


def create_log(user_id: int, request: LogCreateRequest) -> int:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute(
            _INSERT_SQL,
            (
                user_id,
                request.type.value,
                request.content,
                float(request.calories),
                float(request.protein),
                request.recorded_date,
                request.category.value if request.category else None,
            ),
        )
        return int(cur.lastrowid)


def create_logs_batch(user_id: int, items: Sequence[BatchItem], recorded_date: str) -> int:
    rows = [
        (
            user_id,
            item.type.value,
            item.name,
            float(item.calories),
            float(item.protein or 0.0),
            recorded_date,
            item.category.value if item.category else None,
        )
        for item in items
    ]
    # db_conn commits once on exit, so the batch lands atomically.
    with db_conn(settings.db_path) as conn:
        conn.executemany(_INSERT_SQL, rows)
    return len(rows)


def list_logs(user_id: int, date: Optional[str] = None) -> List[Dict[str, Any]]:
    query = "SELECT * FROM activity_logs WHERE user_id = ?"
    params: List[Any] = [user_id]
    if date:
        query += " AND recorded_date = ?"
        params.append(date)
    query += " ORDER BY created_at DESC, id DESC"
    with db_conn(settings.db_path) as conn:
        rows = conn.execute(query, params).fetchall()
        return [dict(r) for r in rows]


def delete_log(user_id: int, log_id: int) -> bool:
    with db_conn(settings.db_path) as conn:
        cur = conn.execute("DELETE FROM activity_logs WHERE id = ? AND user_id = ?", (log_id, user_id))
        return cur.rowcount > 0
