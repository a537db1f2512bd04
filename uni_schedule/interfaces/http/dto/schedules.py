from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from uni_schedule.domain.schedules.entities import WeekType


class CreateScheduleRequestDTO(BaseModel):
    title: str = Field(min_length=1, max_length=128)


class ScheduleDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    created_at: datetime


class CreateClassRequestDTO(BaseModel):
    schedule_id: int = Field(ge=1)
    name: str = Field(min_length=1, max_length=128)
    weekday: int = Field(ge=0, le=6)
    position: int = Field(ge=1, le=16)
    week_type: WeekType = WeekType.ALL
    teacher: str | None = Field(None, max_length=128)
    room: str | None = Field(None, max_length=32)


class UpdateClassRequestDTO(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    weekday: int | None = Field(None, ge=0, le=6)
    position: int | None = Field(None, ge=1, le=16)
    week_type: WeekType | None = None
    teacher: str | None = Field(None, max_length=128)
    room: str | None = Field(None, max_length=32)


class ClassDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    weekday: int
    position: int
    week_type: WeekType
    teacher: str | None = None
    room: str | None = None
    schedule_id: int | None = None


class CreatedDTO(BaseModel):
    id: int


class OkDTO(BaseModel):
    ok: bool = True
