from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from uni_schedule.domain.users.entities import Role

_USERNAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_.]*$")


def _check_username(value: str) -> str:
    if not _USERNAME_RE.match(value):
        raise PydanticCustomError(
            "username_invalid_chars",
            "Username must start with a letter and contain only letters, digits, '_' or '.'",
            {"pattern": _USERNAME_RE.pattern},
        )
    return value


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, value: str) -> str:
        if not re.search(r"[A-Za-z]", value) or not re.search(r"\d", value):
            raise PydanticCustomError(
                "password_weak",
                "Password must contain at least one letter and one digit",
                {},
            )
        return value


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)  # No strength check on login


class RefreshRequestDTO(BaseModel):
    refresh_token: str = Field(min_length=1, max_length=2048)


class TokenPairDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"


class UserDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
    created_at: datetime
