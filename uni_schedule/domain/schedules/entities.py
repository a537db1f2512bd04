# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Schedules and the classes that fill them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from uni_schedule.domain.exceptions import InvariantViolation

WEEKDAYS = range(0, 7)
CLEARABLE_FIELDS = frozenset({"teacher", "room"})


class WeekType(StrEnum):
    """Which weeks of the term a class takes place on."""

    ALL = "all"
    EVEN = "even"
    ODD = "odd"

    def overlaps(self, other: WeekType) -> bool:
        return self is WeekType.ALL or other is WeekType.ALL or self is other

    def complement(self) -> WeekType:
        if self is WeekType.EVEN:
            return WeekType.ODD
        if self is WeekType.ODD:
            return WeekType.EVEN
        raise InvariantViolation("'all' has no complementary parity", field="week_type")


def _validate_slot(weekday: int | None, position: int | None) -> None:
    if weekday is not None and weekday not in WEEKDAYS:
        raise InvariantViolation("weekday must be within 0..6", field="weekday")
    if position is not None and position < 1:
        raise InvariantViolation("position must be >= 1", field="position")


@dataclass(slots=True, frozen=True)
class Schedule:

    id: int
    user_id: int
    title: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class ScheduleCreate:

    user_id: int
    title: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Class:
    """A single lesson placed in a weekly slot of one schedule."""

    id: int
    schedule_id: int
    name: str
    weekday: int
    position: int
    week_type: WeekType
    teacher: str | None = None
    room: str | None = None

    def __post_init__(self) -> None:
        _validate_slot(self.weekday, self.position)


@dataclass(slots=True, frozen=True)
class ClassView:
    """Read model of a class as listed inside its schedule."""

    id: int
    name: str
    weekday: int
    position: int
    week_type: WeekType
    teacher: str | None
    room: str | None

    def sort_key(self) -> tuple[int, int, str]:
        return (self.weekday, self.position, self.week_type.value)


@dataclass(slots=True, frozen=True)
class CreateClassDTO:

    schedule_id: int
    name: str
    weekday: int
    position: int
    week_type: WeekType = WeekType.ALL
    teacher: str | None = None
    room: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise InvariantViolation("name must not be blank", field="name")
        _validate_slot(self.weekday, self.position)


@dataclass(slots=True, frozen=True)
class UpdateClassDTO:
    """Partial update; ``None`` leaves a field untouched.

    Optional fields named in ``cleared`` are reset to ``None``.
    """

    name: str | None = None
    weekday: int | None = None
    position: int | None = None
    week_type: WeekType | None = None
    teacher: str | None = None
    room: str | None = None
    cleared: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if self.name is not None and not self.name.strip():
            raise InvariantViolation("name must not be blank", field="name")
        _validate_slot(self.weekday, self.position)
        unknown = self.cleared - CLEARABLE_FIELDS
        if unknown:
            raise InvariantViolation(
                f"cannot clear {', '.join(sorted(unknown))}", field="cleared"
            )

    def moves_slot(self) -> bool:
        return any(v is not None for v in (self.weekday, self.position, self.week_type))
