# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from flask import g, request

from uni_schedule.domain.users.exceptions import InvalidAccessTokenError
from uni_schedule.shared.logging import logger

F = TypeVar("F", bound=Callable[..., Any])


def bearer_token() -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def current_user_id() -> int:
    return int(g.user_id)


def auth_required(view: F) -> F:
    """Resolve the bearer access token through the controller's ``_auth_service``.

    The user is exposed as ``flask.g.user`` and its id as ``flask.g.user_id``.
    """

    @wraps(view)
    def inner(self, *args: Any, **kwargs: Any) -> Any:
        token = bearer_token()
        if not token:
            logger.info(f"No bearer token on {request.method} {request.path}")
            raise InvalidAccessTokenError()
        user = self._auth_service.get_user_from_access_token(token)
        g.user = user
        g.user_id = user.id
        return view(self, *args, **kwargs)

    return inner  # type: ignore[return-value]
