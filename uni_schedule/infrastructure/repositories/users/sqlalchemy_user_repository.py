# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from uni_schedule.domain.users.entities import RefreshToken as DomainRefreshToken
from uni_schedule.domain.users.entities import Role
from uni_schedule.domain.users.entities import User as DomainUser
from uni_schedule.domain.users.entities import UserCreate
from uni_schedule.domain.users.repositories import TokenRepository, UserRepository
from uni_schedule.infrastructure.db.models import RefreshToken, User
from uni_schedule.infrastructure.unit_of_work import SessionFactory, unit_of_work_scope
from uni_schedule.shared.errors.base import AlreadyExistsError, NotFoundError


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        role=Role(row.role),
        created_at=_aware(row.created_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def get_by_username(self, username: str) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            if row is None:
                raise NotFoundError(context={"entity": "user"})
            return _to_domain(row)

    def get_by_id(self, user_id: int) -> DomainUser:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            if row is None:
                raise NotFoundError(context={"entity": "user", "id": user_id})
            return _to_domain(row)

    def create(self, user: UserCreate) -> int:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    username=user.username,
                    password_hash=user.password_hash,
                    role=user.role.value,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                return row.id
        except IntegrityError as exc:
            raise AlreadyExistsError(context={"entity": "user"}) from exc


class SqlAlchemyTokenRepository(TokenRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def get_by_user_id(self, user_id: int) -> DomainRefreshToken:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(RefreshToken, user_id)
            if row is None:
                raise NotFoundError(context={"entity": "refresh_token", "user_id": user_id})
            return DomainRefreshToken(
                user_id=row.user_id,
                refresh_token=row.refresh_token,
                updated_at=_aware(row.updated_at),
            )

    def create_or_update(self, token: DomainRefreshToken) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(RefreshToken, token.user_id, with_for_update=True)
            if row is None:
                session.add(
                    RefreshToken(
                        user_id=token.user_id,
                        refresh_token=token.refresh_token,
                        updated_at=token.updated_at,
                    )
                )
                return
            row.refresh_token = token.refresh_token
            row.updated_at = token.updated_at
