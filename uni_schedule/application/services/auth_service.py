# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Login, registration and token rotation."""

from __future__ import annotations

from datetime import UTC, datetime

from uni_schedule.domain.users.entities import RefreshToken, Role, TokenPair, User, UserCreate
from uni_schedule.domain.users.exceptions import (
    InvalidAccessTokenError,
    InvalidLoginOrPasswordError,
    InvalidRefreshTokenError,
    MalformedTokenError,
    UsernameAlreadyTakenError,
    UserNotFoundError,
)
from uni_schedule.domain.users.repositories import (
    JWTManager,
    PasswordHasher,
    TokenRepository,
    UserRepository,
)
from uni_schedule.shared.errors.base import AlreadyExistsError, NotFoundError, ServiceError
from uni_schedule.shared.logging import logger


class AuthService:
    """Issues token pairs and keeps exactly one live refresh token per user.

    Every successful login, registration or refresh overwrites the stored
    refresh token, so only the most recently issued one can be exchanged.
    There is no revocation: a refresh token stays valid until superseded.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenRepository,
        jwt_manager: JWTManager,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._jwt = jwt_manager
        self._password_hasher = password_hasher

    def login(self, username: str, password: str) -> TokenPair:
        try:
            user = self._users.get_by_username(username)
        except NotFoundError:
            logger.warning("auth.login: rejected, unknown username")
            raise InvalidLoginOrPasswordError() from None
        except Exception as exc:
            raise ServiceError("AuthService.login: get user by username") from exc

        if not self._password_hasher.verify(password, user.password_hash):
            logger.warning(f"auth.login: rejected, bad password user_id={user.id}")
            raise InvalidLoginOrPasswordError()

        pair = self._issue(user.id, "AuthService.login")
        logger.info(f"auth.login: ok user_id={user.id}")
        return pair

    def register(self, username: str, password: str) -> TokenPair:
        try:
            password_hash = self._password_hasher.hash(password)
        except Exception as exc:
            raise ServiceError("AuthService.register: hashing password") from exc

        try:
            user_id = self._users.create(
                UserCreate(
                    username=username,
                    password_hash=password_hash,
                    role=Role.STUDENT,
                    created_at=datetime.now(UTC),
                )
            )
        except AlreadyExistsError:
            logger.info("auth.register: username already taken")
            raise UsernameAlreadyTakenError() from None
        except Exception as exc:
            raise ServiceError("AuthService.register: create user") from exc

        pair = self._issue(user_id, "AuthService.register")
        logger.info(f"auth.register: ok user_id={user_id}")
        return pair

    def refresh_token(self, refresh_token: str) -> TokenPair:
        try:
            user_id = self._jwt.parse_refresh_token(refresh_token)
        except MalformedTokenError:
            logger.warning("auth.refresh: rejected, unparsable refresh token")
            raise InvalidRefreshTokenError() from None

        try:
            stored = self._tokens.get_by_user_id(user_id)
        except NotFoundError:
            raise UserNotFoundError() from None
        except Exception as exc:
            raise ServiceError("AuthService.refresh_token: get token by user id") from exc

        if stored.refresh_token != refresh_token:
            logger.warning(f"auth.refresh: rejected, superseded token user_id={user_id}")
            raise InvalidRefreshTokenError()

        pair = self._issue(user_id, "AuthService.refresh_token")
        logger.info(f"auth.refresh: ok user_id={user_id}")
        return pair

    def get_user_from_access_token(self, access_token: str) -> User:
        try:
            user_id = self._jwt.parse_access_token(access_token)
        except MalformedTokenError:
            raise InvalidAccessTokenError() from None

        try:
            return self._users.get_by_id(user_id)
        except Exception:
            logger.info(f"auth.access: no user behind token user_id={user_id}")
            raise UserNotFoundError() from None

    def _issue(self, user_id: int, operation: str) -> TokenPair:
        try:
            pair = self._generate_token_pair(user_id)
        except Exception as exc:
            raise ServiceError(f"{operation}: generate token pair") from exc

        try:
            self._tokens.create_or_update(
                RefreshToken(
                    user_id=user_id,
                    refresh_token=pair.refresh_token,
                    updated_at=datetime.now(UTC),
                )
            )
        except Exception as exc:
            raise ServiceError(f"{operation}: create or update token") from exc
        return pair

    def _generate_token_pair(self, user_id: int) -> TokenPair:
        access_token = self._jwt.generate_access_token(user_id)
        refresh_token = self._jwt.generate_refresh_token(user_id)
        return TokenPair(access_token=access_token, refresh_token=refresh_token)
