# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from flask import Blueprint, Response, g, jsonify

from uni_schedule.application.services.auth_service import AuthService
from uni_schedule.domain.users.entities import TokenPair
from uni_schedule.infrastructure.observability import record_auth_event
from uni_schedule.interfaces.http.auth import auth_required
from uni_schedule.interfaces.http.dto.auth import (LoginRequestDTO, RefreshRequestDTO,
                                                   RegisterRequestDTO, TokenPairDTO,
                                                   UserDTO)
from uni_schedule.interfaces.http.parsing import parse_body
from uni_schedule.shared.errors import AppError


def _pair_response(pair: TokenPair) -> Response:
    return jsonify(TokenPairDTO.model_validate(pair).model_dump())


def _counted(operation: str, issue: Callable[[], TokenPair]) -> TokenPair:
    try:
        pair = issue()
    except AppError as exc:
        record_auth_event(operation, exc.code)
        raise
    record_auth_event(operation, "ok")
    return pair


class AuthController:
    def __init__(self, *, auth_service: AuthService) -> None:
        self._auth_service = auth_service

    def register(self) -> tuple[Response, int]:
        dto = parse_body(RegisterRequestDTO)
        pair = _counted(
            "register", lambda: self._auth_service.register(dto.username, dto.password)
        )
        return _pair_response(pair), 201

    def login(self) -> tuple[Response, int]:
        dto = parse_body(LoginRequestDTO)
        pair = _counted("login", lambda: self._auth_service.login(dto.username, dto.password))
        return _pair_response(pair), 200

    def refresh(self) -> tuple[Response, int]:
        dto = parse_body(RefreshRequestDTO)
        pair = _counted("refresh", lambda: self._auth_service.refresh_token(dto.refresh_token))
        return _pair_response(pair), 200

    @auth_required
    def me(self) -> tuple[Response, int]:
        return jsonify(UserDTO.model_validate(g.user).model_dump(mode="json")), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        return bp
