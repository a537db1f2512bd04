# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from uni_schedule.domain.schedules.entities import Class, ClassView, CreateClassDTO, UpdateClassDTO
from uni_schedule.domain.schedules.exceptions import DontHavePermissionError
from uni_schedule.domain.schedules.repositories import ClassRepository, ScheduleRepository
from uni_schedule.shared.logging import logger


class ClassService:
    def __init__(self, *, classes: ClassRepository, schedules: ScheduleRepository) -> None:
        self._classes = classes
        self._schedules = schedules

    def create(self, dto: CreateClassDTO) -> int:
        class_id = self._classes.create_or_split(dto)
        logger.info(f"class.create: ok schedule_id={dto.schedule_id} class_id={class_id}")
        return class_id

    def get_by_id(self, class_id: int) -> Class:
        return self._classes.get_by_id(class_id)

    def get_all(self, schedule_id: int) -> list[ClassView]:
        views, _total = self._classes.get_all_views(schedule_id)
        return views

    def update(self, user_id: int, class_id: int, update: UpdateClassDTO) -> None:
        entry = self._verify_owner(user_id, class_id)
        self._classes.update_or_switch(class_id, entry.schedule_id, update)
        logger.info(f"class.update: ok user_id={user_id} class_id={class_id}")

    def delete(self, user_id: int, class_id: int) -> None:
        self._verify_owner(user_id, class_id)
        self._classes.delete(class_id)
        logger.info(f"class.delete: ok user_id={user_id} class_id={class_id}")

    def _verify_owner(self, user_id: int, class_id: int) -> Class:
        entry = self._classes.get_by_id(class_id)
        schedule = self._schedules.get_by_id(entry.schedule_id)
        if schedule.user_id != user_id:
            logger.warning(
                f"class.ownership: denied user_id={user_id} class_id={class_id} "
                f"owner_id={schedule.user_id}"
            )
            raise DontHavePermissionError()
        return entry
