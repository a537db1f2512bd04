# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import TypeVar

from flask import request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from uni_schedule.shared.errors.validation import raise_validation_error

M = TypeVar("M", bound=BaseModel)


def parse_body(model: type[M]) -> M:
    try:
        return model.model_validate(request.get_json(silent=True) or {})
    except PydanticValidationError as exc:
        raise_validation_error(exc)
