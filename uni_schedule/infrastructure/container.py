# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from uni_schedule.application.services.auth_service import AuthService
from uni_schedule.application.services.class_service import ClassService
from uni_schedule.application.services.password_hashing import WerkzeugPasswordHasher
from uni_schedule.application.services.schedule_service import ScheduleService
from uni_schedule.infrastructure.auth.jwt_manager import JwtManager
from uni_schedule.infrastructure.db import SessionLocal
from uni_schedule.infrastructure.repositories.schedules.sqlalchemy_schedule_repository import (
    SqlAlchemyClassRepository, SqlAlchemyScheduleRepository)
from uni_schedule.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyTokenRepository, SqlAlchemyUserRepository)
from uni_schedule.interfaces.http.controllers.auth_controller import AuthController
from uni_schedule.interfaces.http.controllers.classes_controller import ClassesController
from uni_schedule.interfaces.http.controllers.schedules_controller import \
    SchedulesController
from uni_schedule.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or load_config()

    # Collaborators

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(salt=self._config.security.password_salt)

    @cached_property
    def jwt_manager(self) -> JwtManager:
        return JwtManager.from_config(self._config.jwt)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(SessionLocal)

    @cached_property
    def token_repository(self) -> SqlAlchemyTokenRepository:
        return SqlAlchemyTokenRepository(SessionLocal)

    @cached_property
    def schedule_repository(self) -> SqlAlchemyScheduleRepository:
        return SqlAlchemyScheduleRepository(SessionLocal)

    @cached_property
    def class_repository(self) -> SqlAlchemyClassRepository:
        return SqlAlchemyClassRepository(SessionLocal)

    # Services

    @cached_property
    def auth_service(self) -> AuthService:
        return AuthService(
            users=self.user_repository,
            tokens=self.token_repository,
            jwt_manager=self.jwt_manager,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def schedule_service(self) -> ScheduleService:
        return ScheduleService(schedules=self.schedule_repository)

    @cached_property
    def class_service(self) -> ClassService:
        return ClassService(classes=self.class_repository, schedules=self.schedule_repository)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(auth_service=self.auth_service)

    @cached_property
    def schedules_controller(self) -> SchedulesController:
        return SchedulesController(
            schedule_service=self.schedule_service,
            auth_service=self.auth_service,
        )

    @cached_property
    def classes_controller(self) -> ClassesController:
        return ClassesController(
            class_service=self.class_service,
            auth_service=self.auth_service,
        )


container = Container()
