# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Role(StrEnum):
    STUDENT = "student"
    ADMIN = "admin"


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    password_hash: str
    role: Role
    created_at: datetime


@dataclass(slots=True, frozen=True)
class UserCreate:

    username: str
    password_hash: str
    role: Role
    created_at: datetime


@dataclass(slots=True, frozen=True)
class RefreshToken:
    """The single live refresh token of a user."""

    user_id: int
    refresh_token: str
    updated_at: datetime


@dataclass(slots=True, frozen=True)
class TokenPair:

    access_token: str
    refresh_token: str
