# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transactional scope shared by the SQLAlchemy repositories."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from uni_schedule.shared.logging import logger

SessionFactory = Callable[[], Session]


@dataclass(slots=True)
class SqlAlchemyUnitOfWork:
    """Opens a session on enter; commits on clean exit, rolls back otherwise."""

    session_factory: SessionFactory
    _session: Session | None = field(default=None, init=False)

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if exc is None:
                self._session.commit()
            else:
                logger.debug(f"uow: rollback due to {exc_type.__name__}")
                self._session.rollback()
        except Exception:
            logger.exception("uow: exception while finalising")
            self._session.rollback()
            raise
        finally:
            self._session.close()
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork session accessed before entering context")
        return self._session


@contextmanager
def unit_of_work_scope(factory: SessionFactory) -> Iterator[Session]:
    with SqlAlchemyUnitOfWork(factory) as uow:
        yield uow.session
