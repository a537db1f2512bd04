# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import Class, ClassView, CreateClassDTO, Schedule, ScheduleCreate, UpdateClassDTO


class ScheduleRepository(Protocol):
    def create(self, schedule: ScheduleCreate) -> int: ...
    def get_by_id(self, schedule_id: int) -> Schedule: ...
    def list_for_user(self, user_id: int) -> Sequence[Schedule]: ...
    def delete(self, schedule_id: int) -> None: ...


class ClassRepository(Protocol):
    def create_or_split(self, dto: CreateClassDTO) -> int: ...
    def get_by_id(self, class_id: int) -> Class: ...
    def get_all_views(self, schedule_id: int) -> tuple[list[ClassView], int]: ...
    def update_or_switch(self, class_id: int, schedule_id: int, update: UpdateClassDTO) -> None: ...
    def delete(self, class_id: int) -> None: ...
