# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import (
    Class,
    ClassView,
    CreateClassDTO,
    Schedule,
    ScheduleCreate,
    UpdateClassDTO,
    WeekType,
)
from .exceptions import DontHavePermissionError
from .repositories import ClassRepository, ScheduleRepository

__all__ = [
    "Class",
    "ClassRepository",
    "ClassView",
    "CreateClassDTO",
    "DontHavePermissionError",
    "Schedule",
    "ScheduleCreate",
    "ScheduleRepository",
    "UpdateClassDTO",
    "WeekType",
]
