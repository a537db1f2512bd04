# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed access and refresh tokens keyed by user id."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from uni_schedule.domain.users.exceptions import MalformedTokenError
from uni_schedule.domain.users.repositories import JWTManager
from uni_schedule.shared.config.settings import JwtConfig

ACCESS = "access"
REFRESH = "refresh"


class JwtManager(JWTManager):
    def __init__(
        self,
        *,
        secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=30),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = {ACCESS: access_ttl, REFRESH: refresh_ttl}
        self._clock = clock or (lambda: datetime.now(UTC))

    @classmethod
    def from_config(cls, config: JwtConfig) -> JwtManager:
        return cls(
            secret=config.secret,
            algorithm=config.algorithm,
            access_ttl=timedelta(seconds=config.access_ttl_seconds),
            refresh_ttl=timedelta(seconds=config.refresh_ttl_seconds),
        )

    def generate_access_token(self, user_id: int) -> str:
        return self._encode(user_id, ACCESS)

    def generate_refresh_token(self, user_id: int) -> str:
        return self._encode(user_id, REFRESH)

    def parse_access_token(self, token: str) -> int:
        return self._decode(token, ACCESS)

    def parse_refresh_token(self, token: str) -> int:
        return self._decode(token, REFRESH)

    def _encode(self, user_id: int, token_type: str) -> str:
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "type": token_type,
            "jti": uuid.uuid4().hex,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl[token_type]).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def _decode(self, token: str, token_type: str) -> int:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "type"]},
            )
        except jwt.PyJWTError as exc:
            raise MalformedTokenError(str(exc)) from exc

        if payload.get("type") != token_type:
            raise MalformedTokenError(f"expected a {token_type} token")
        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise MalformedTokenError("subject is not a user id") from exc
