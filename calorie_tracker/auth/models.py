# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Role(str, Enum):
    user = "USER"
    admin = "ADMIN"


class GoogleProfile(BaseModel):
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None


class UserPublic(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
    role: Role = Role.user


class MeResponse(BaseModel):
    user: Optional[UserPublic] = None
