# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from uni_schedule.domain.exceptions import InvariantViolation
from uni_schedule.domain.schedules.entities import Schedule, ScheduleCreate
from uni_schedule.domain.schedules.exceptions import DontHavePermissionError
from uni_schedule.domain.schedules.repositories import ScheduleRepository
from uni_schedule.shared.logging import logger


class ScheduleService:
    def __init__(self, *, schedules: ScheduleRepository) -> None:
        self._schedules = schedules

    def create(self, user_id: int, title: str) -> int:
        title = title.strip()
        if not title:
            raise InvariantViolation("title must not be blank", field="title")
        schedule_id = self._schedules.create(
            ScheduleCreate(user_id=user_id, title=title, created_at=datetime.now(UTC))
        )
        logger.info(f"schedule.create: ok user_id={user_id} schedule_id={schedule_id}")
        return schedule_id

    def get_by_id(self, schedule_id: int) -> Schedule:
        return self._schedules.get_by_id(schedule_id)

    def list_for_user(self, user_id: int) -> Sequence[Schedule]:
        return self._schedules.list_for_user(user_id)

    def delete(self, user_id: int, schedule_id: int) -> None:
        schedule = self._schedules.get_by_id(schedule_id)
        if schedule.user_id != user_id:
            logger.warning(
                f"schedule.delete: denied user_id={user_id} schedule_id={schedule_id}"
            )
            raise DontHavePermissionError()
        self._schedules.delete(schedule_id)
        logger.info(f"schedule.delete: ok user_id={user_id} schedule_id={schedule_id}")
