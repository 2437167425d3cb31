# -*- coding: utf-8 -*-
"""Admin — global usage queries."""

from __future__ import annotations

import math
import sqlite3
from typing import Any, Dict, List, Tuple

from ..app_db import db_conn
from ..config import settings


def _search_clause(search: str) -> Tuple[str, List[Any]]:
    term = (search or "").strip()
    if not term:
        return "", []
    like = f"%{term}%"
    clause = "WHERE (u.name LIKE ? OR u.email LIKE ? OR l.content LIKE ? OR l.type LIKE ?)"
    return clause, [like, like, like, like]


def get_admin_summary(*, page: int, limit: int, search: str = "") -> Dict[str, Any]:
    offset = (page - 1) * limit
    where, params = _search_clause(search)
    with db_conn(settings.db_path) as conn:
        total_users = conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
        total_logs = conn.execute("SELECT COUNT(*) FROM activity_logs").fetchone()[0]
        filtered_total = conn.execute(
            f"SELECT COUNT(*) FROM activity_logs l JOIN users u ON l.user_id = u.id {where}",
            params,
        ).fetchone()[0]
        rows = conn.execute(
            f"""
            SELECT l.*, u.email, u.name
            FROM activity_logs l
            JOIN users u ON l.user_id = u.id
            {where}
            ORDER BY l.created_at DESC, l.id DESC
            LIMIT ? OFFSET ?
            """,
            [*params, limit, offset],
        ).fetchall()

    return {
        "total_users": int(total_users),
        "total_logs": int(total_logs),
        "filtered_total": int(filtered_total),
        "recent_logs": [dict(r) for r in rows],
        "page": page,
        "limit": limit,
        "total_pages": math.ceil(filtered_total / limit) if limit else 0,
    }


def check_database() -> Tuple[bool, str]:
    try:
        with db_conn(settings.db_path) as conn:
            conn.execute("SELECT 1").fetchone()
    except sqlite3.Error as exc:
        return False, str(exc)
    return True, "Connected"
