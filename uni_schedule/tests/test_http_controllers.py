from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask
from prometheus_client import REGISTRY

from uni_schedule.application.services.auth_service import AuthService
from uni_schedule.application.services.class_service import ClassService
from uni_schedule.application.services.schedule_service import ScheduleService
from uni_schedule.domain.schedules.entities import Class, UpdateClassDTO, WeekType
from uni_schedule.domain.schedules.exceptions import DontHavePermissionError
from uni_schedule.domain.users.entities import Role, TokenPair, User
from uni_schedule.domain.users.exceptions import (
    InvalidAccessTokenError,
    InvalidLoginOrPasswordError,
    InvalidRefreshTokenError,
)
from uni_schedule.interfaces.http.controllers.auth_controller import AuthController
from uni_schedule.interfaces.http.controllers.classes_controller import ClassesController
from uni_schedule.interfaces.http.controllers.schedules_controller import SchedulesController
from uni_schedule.shared.errors.base import ServiceError
from uni_schedule.shared.middleware.error_handler import configure_error_handling

ALICE = User(
    id=1,
    username="alice",
    password_hash="hash",
    role=Role.STUDENT,
    created_at=datetime(2024, 9, 1, tzinfo=UTC),
)


class StubAuthService:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def register(self, username: str, password: str) -> TokenPair:
        self.calls.append(("register", username, password))
        return TokenPair(access_token="a1", refresh_token="r1")

    def login(self, username: str, password: str) -> TokenPair:
        if password != "pw123456":
            raise InvalidLoginOrPasswordError()
        return TokenPair(access_token="a1", refresh_token="r1")

    def refresh_token(self, refresh_token: str) -> TokenPair:
        if refresh_token != "r1":
            raise InvalidRefreshTokenError()
        return TokenPair(access_token="a2", refresh_token="r2")

    def get_user_from_access_token(self, access_token: str) -> User:
        if access_token != "good":
            raise InvalidAccessTokenError()
        return ALICE


@pytest.fixture()
def auth() -> StubAuthService:
    return StubAuthService()


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


@pytest.fixture()
def auth_app(flask_app: Flask, auth: StubAuthService) -> Flask:
    controller = AuthController(auth_service=cast(AuthService, auth))
    flask_app.register_blueprint(controller.as_blueprint())
    return flask_app


def test_register_returns_token_pair(auth_app: Flask, auth: StubAuthService) -> None:
    with auth_app.test_client() as client:
        response = client.post(
            "/api/auth/register", json={"username": "alice", "password": "secret123"}
        )

    assert response.status_code == 201
    assert response.get_json() == {
        "access_token": "a1",
        "refresh_token": "r1",
        "token_type": "Bearer",
    }
    assert auth.calls == [("register", "alice", "secret123")]


def test_register_invalid_payload_returns_422(auth_app: Flask, auth: StubAuthService) -> None:
    with auth_app.test_client() as client:
        response = client.post("/api/auth/register", json={"username": "a"})

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "username" in payload["context"]["fields"]
    assert auth.calls == []


def test_login_wrong_password_is_401(auth_app: Flask) -> None:
    with auth_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"username": "alice", "password": "nope"}
        )

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_login_or_password"}


def test_refresh_endpoint(auth_app: Flask) -> None:
    with auth_app.test_client() as client:
        ok = client.post("/api/auth/refresh", json={"refresh_token": "r1"})
        stale = client.post("/api/auth/refresh", json={"refresh_token": "r0"})

    assert ok.status_code == 200
    assert ok.get_json()["refresh_token"] == "r2"
    assert stale.status_code == 401
    assert stale.get_json()["error"] == "invalid_refresh_token"


def test_me_requires_bearer_token(auth_app: Flask) -> None:
    with auth_app.test_client() as client:
        missing = client.get("/api/auth/me")
        bad = client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})
        good = client.get("/api/auth/me", headers={"Authorization": "Bearer good"})

    assert missing.status_code == 401
    assert bad.get_json()["error"] == "invalid_access_token"
    assert good.status_code == 200
    body = good.get_json()
    assert body["username"] == "alice"
    assert body["role"] == "student"
    assert "password_hash" not in body


def test_service_error_is_500(flask_app: Flask) -> None:
    failing = MagicMock()
    failing.login.side_effect = ServiceError("AuthService.login: get user by username")
    flask_app.register_blueprint(
        AuthController(auth_service=cast(AuthService, failing)).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"username": "alice", "password": "pw123456"}
        )

    assert response.status_code == 500
    assert response.get_json() == {"error": "service_error"}


def test_class_update_forbidden_for_stranger(flask_app: Flask, auth: StubAuthService) -> None:
    classes = MagicMock()
    classes.update.side_effect = DontHavePermissionError()
    controller = ClassesController(
        class_service=cast(ClassService, classes), auth_service=cast(AuthService, auth)
    )
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.patch(
            "/api/classes/5", json={"room": "A-1"}, headers={"Authorization": "Bearer good"}
        )

    assert response.status_code == 403
    assert response.get_json()["error"] == "dont_have_permission"
    classes.update.assert_called_once_with(1, 5, UpdateClassDTO(room="A-1"))


def test_class_read_is_public(flask_app: Flask, auth: StubAuthService) -> None:
    classes = MagicMock()
    classes.get_by_id.return_value = Class(
        id=5,
        schedule_id=2,
        name="Calculus",
        weekday=0,
        position=1,
        week_type=WeekType.EVEN,
    )
    controller = ClassesController(
        class_service=cast(ClassService, classes), auth_service=cast(AuthService, auth)
    )
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/classes/5")

    assert response.status_code == 200
    assert response.get_json()["week_type"] == "even"
    assert response.get_json()["schedule_id"] == 2


def test_create_schedule_uses_caller_id(flask_app: Flask, auth: StubAuthService) -> None:
    schedules = MagicMock()
    schedules.create.return_value = 9
    controller = SchedulesController(
        schedule_service=cast(ScheduleService, schedules), auth_service=cast(AuthService, auth)
    )
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/schedules", json={"title": "Group 101"}, headers={"Authorization": "Bearer good"}
        )

    assert response.status_code == 201
    assert response.get_json() == {"id": 9}
    schedules.create.assert_called_once_with(1, "Group 101")


def test_auth_outcomes_are_counted(auth_app: Flask) -> None:
    labels = {"operation": "login", "outcome": "invalid_login_or_password"}

    def failures() -> float:
        return REGISTRY.get_sample_value("uni_schedule_auth_events_total", labels) or 0.0

    before = failures()
    with auth_app.test_client() as client:
        client.post("/api/auth/login", json={"username": "alice", "password": "nope"})

    assert failures() == before + 1


def test_class_patch_null_clears_field(flask_app: Flask, auth: StubAuthService) -> None:
    classes = MagicMock()
    controller = ClassesController(
        class_service=cast(ClassService, classes), auth_service=cast(AuthService, auth)
    )
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.patch(
            "/api/classes/5",
            json={"room": None, "name": "Algebra"},
            headers={"Authorization": "Bearer good"},
        )

    assert response.status_code == 200
    classes.update.assert_called_once_with(
        1, 5, UpdateClassDTO(name="Algebra", cleared=frozenset({"room"}))
    )
