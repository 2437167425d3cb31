# -*- coding: utf-8 -*-
"""Auth — DB storage helpers."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ..app_db import db_conn
from ..config import settings
from .models import GoogleProfile, Role


def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (email.lower().strip(),)).fetchone()
        return dict(row) if row else None


def get_user_by_id(user_id: int) -> Optional[Dict[str, Any]]:
    with db_conn(settings.db_path) as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row else None


def role_for_new_user(email: str) -> Role:
    return Role.admin if email.lower().strip() in settings.admin_emails else Role.user


def upsert_google_user(profile: GoogleProfile) -> Tuple[Dict[str, Any], bool]:
    """Insert the profile as a new user or refresh an existing one.

    Returns ``(user_row, created)``. Existing users keep their id and role.
    The insert goes first so two concurrent first logins for the same email
    resolve to one row; only the winner reports ``created``.
    """
    email_norm = profile.email.lower().strip()
    with db_conn(settings.db_path) as conn:
        cur = conn.execute(
            "INSERT INTO users (email, name, picture, role) VALUES (?, ?, ?, ?) "
            "ON CONFLICT(email) DO NOTHING",
            (email_norm, profile.name, profile.picture, role_for_new_user(email_norm).value),
        )
        created = cur.rowcount == 1
        if not created:
            conn.execute(
                "UPDATE users SET name = ?, picture = ? WHERE email = ?",
                (profile.name, profile.picture, email_norm),
            )
        user = conn.execute("SELECT * FROM users WHERE email = ?", (email_norm,)).fetchone()
    return dict(user), created
