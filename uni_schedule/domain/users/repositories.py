# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import RefreshToken, User, UserCreate


class UserRepository(Protocol):
    def get_by_username(self, username: str) -> User: ...
    def get_by_id(self, user_id: int) -> User: ...
    def create(self, user: UserCreate) -> int: ...


class TokenRepository(Protocol):
    def get_by_user_id(self, user_id: int) -> RefreshToken: ...
    def create_or_update(self, token: RefreshToken) -> None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class JWTManager(Protocol):
    def parse_access_token(self, token: str) -> int: ...
    def parse_refresh_token(self, token: str) -> int: ...
    def generate_access_token(self, user_id: int) -> str: ...
    def generate_refresh_token(self, user_id: int) -> str: ...
