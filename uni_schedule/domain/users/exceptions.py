# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from uni_schedule.shared.errors.base import DomainError


class InvalidLoginOrPasswordError(DomainError):
    code = "invalid_login_or_password"
    status = HTTPStatus.UNAUTHORIZED


class UsernameAlreadyTakenError(DomainError):
    code = "username_already_taken"
    status = HTTPStatus.CONFLICT


class InvalidRefreshTokenError(DomainError):
    code = "invalid_refresh_token"
    status = HTTPStatus.UNAUTHORIZED


class InvalidAccessTokenError(DomainError):
    code = "invalid_access_token"
    status = HTTPStatus.UNAUTHORIZED


class UserNotFoundError(DomainError):
    code = "user_not_found"
    status = HTTPStatus.NOT_FOUND


class MalformedTokenError(Exception):
    """Raised by a JWT manager when a token cannot be parsed or verified."""
