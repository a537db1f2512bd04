# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from uni_schedule.domain.schedules.entities import Class as DomainClass
from uni_schedule.domain.schedules.entities import ClassView, CreateClassDTO
from uni_schedule.domain.schedules.entities import Schedule as DomainSchedule
from uni_schedule.domain.schedules.entities import ScheduleCreate, UpdateClassDTO, WeekType
from uni_schedule.domain.schedules.repositories import ClassRepository, ScheduleRepository
from uni_schedule.infrastructure.db.models import Class, Schedule
from uni_schedule.infrastructure.unit_of_work import SessionFactory, unit_of_work_scope
from uni_schedule.shared.errors.base import AlreadyExistsError, NotFoundError
from uni_schedule.shared.logging import logger


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _schedule_to_domain(row: Schedule) -> DomainSchedule:
    return DomainSchedule(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        created_at=_aware(row.created_at),
    )


def _class_to_domain(row: Class) -> DomainClass:
    return DomainClass(
        id=row.id,
        schedule_id=row.schedule_id,
        name=row.name,
        weekday=row.weekday,
        position=row.position,
        week_type=WeekType(row.week_type),
        teacher=row.teacher,
        room=row.room,
    )


def _class_to_view(row: Class) -> ClassView:
    return ClassView(
        id=row.id,
        name=row.name,
        weekday=row.weekday,
        position=row.position,
        week_type=WeekType(row.week_type),
        teacher=row.teacher,
        room=row.room,
    )


class SqlAlchemyScheduleRepository(ScheduleRepository):
    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def create(self, schedule: ScheduleCreate) -> int:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = Schedule(
                    user_id=schedule.user_id,
                    title=schedule.title,
                    created_at=schedule.created_at,
                )
                session.add(row)
                session.flush()
                return row.id
        except IntegrityError as exc:
            raise NotFoundError(context={"entity": "user", "id": schedule.user_id}) from exc

    def get_by_id(self, schedule_id: int) -> DomainSchedule:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Schedule, schedule_id)
            if row is None:
                raise NotFoundError(context={"entity": "schedule", "id": schedule_id})
            return _schedule_to_domain(row)

    def list_for_user(self, user_id: int) -> Sequence[DomainSchedule]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.scalars(
                select(Schedule).where(Schedule.user_id == user_id).order_by(Schedule.id.asc())
            ).all()
            return [_schedule_to_domain(row) for row in rows]

    def delete(self, schedule_id: int) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Schedule, schedule_id)
            if row is None:
                raise NotFoundError(context={"entity": "schedule", "id": schedule_id})
            session.delete(row)


class SqlAlchemyClassRepository(ClassRepository):
    """Classes live in ``(schedule, weekday, position)`` slots.

    A slot holds either one class running every week or at most one class
    for even weeks and one for odd weeks.
    """

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    @staticmethod
    def _slot(session: Session, schedule_id: int, weekday: int, position: int) -> list[Class]:
        return list(
            session.scalars(
                select(Class).where(
                    Class.schedule_id == schedule_id,
                    Class.weekday == weekday,
                    Class.position == position,
                )
            )
        )

    def create_or_split(self, dto: CreateClassDTO) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            if session.get(Schedule, dto.schedule_id) is None:
                raise NotFoundError(context={"entity": "schedule", "id": dto.schedule_id})

            week_type = WeekType(dto.week_type)
            for occupant in self._slot(session, dto.schedule_id, dto.weekday, dto.position):
                occupant_type = WeekType(occupant.week_type)
                if not week_type.overlaps(occupant_type):
                    continue
                if occupant_type is WeekType.ALL and week_type is not WeekType.ALL:
                    occupant.week_type = week_type.complement().value
                    logger.debug(
                        f"classes.split: class_id={occupant.id} narrowed to {occupant.week_type}"
                    )
                    continue
                raise AlreadyExistsError(
                    context={
                        "entity": "class",
                        "weekday": dto.weekday,
                        "position": dto.position,
                        "week_type": week_type.value,
                    }
                )

            row = Class(
                schedule_id=dto.schedule_id,
                name=dto.name,
                weekday=dto.weekday,
                position=dto.position,
                week_type=week_type.value,
                teacher=dto.teacher,
                room=dto.room,
            )
            session.add(row)
            session.flush()
            return row.id

    def get_by_id(self, class_id: int) -> DomainClass:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Class, class_id)
            if row is None:
                raise NotFoundError(context={"entity": "class", "id": class_id})
            return _class_to_domain(row)

    def get_all_views(self, schedule_id: int) -> tuple[list[ClassView], int]:
        with unit_of_work_scope(self._session_factory) as session:
            if session.get(Schedule, schedule_id) is None:
                raise NotFoundError(context={"entity": "schedule", "id": schedule_id})
            rows = session.scalars(
                select(Class)
                .where(Class.schedule_id == schedule_id)
                .order_by(Class.weekday, Class.position, Class.week_type)
            ).all()
            views = [_class_to_view(row) for row in rows]
            return views, len(views)

    def update_or_switch(self, class_id: int, schedule_id: int, update: UpdateClassDTO) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Class, class_id)
            if row is None or row.schedule_id != schedule_id:
                raise NotFoundError(context={"entity": "class", "id": class_id})

            if update.name is not None:
                row.name = update.name
            if update.teacher is not None:
                row.teacher = update.teacher
            if update.room is not None:
                row.room = update.room
            if "teacher" in update.cleared:
                row.teacher = None
            if "room" in update.cleared:
                row.room = None
            if not update.moves_slot():
                return

            old_weekday, old_position = row.weekday, row.position
            old_type = WeekType(row.week_type)
            new_weekday = update.weekday if update.weekday is not None else old_weekday
            new_position = update.position if update.position is not None else old_position
            new_type = WeekType(update.week_type) if update.week_type is not None else old_type
            if (new_weekday, new_position, new_type) == (old_weekday, old_position, old_type):
                return

            clashing = [
                other
                for other in self._slot(session, schedule_id, new_weekday, new_position)
                if other.id != row.id and new_type.overlaps(WeekType(other.week_type))
            ]
            same_slot = (new_weekday, new_position) == (old_weekday, old_position)
            if clashing and (same_slot or (len(clashing) > 1 and old_type is not WeekType.ALL)):
                raise AlreadyExistsError(
                    context={
                        "entity": "class",
                        "weekday": new_weekday,
                        "position": new_position,
                        "week_type": new_type.value,
                    }
                )

            # Displaced classes take over the slot being vacated.
            for other in clashing:
                other.weekday = old_weekday
                other.position = old_position
                if len(clashing) == 1:
                    other.week_type = old_type.value
                logger.debug(
                    f"classes.switch: class_id={other.id} moved to "
                    f"weekday={old_weekday} position={old_position}"
                )

            row.weekday = new_weekday
            row.position = new_position
            row.week_type = new_type.value

    def delete(self, class_id: int) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(Class, class_id)
            if row is None:
                raise NotFoundError(context={"entity": "class", "id": class_id})
            session.delete(row)
