# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from uni_schedule.shared.errors.base import DomainError


class DontHavePermissionError(DomainError):
    code = "dont_have_permission"
    status = HTTPStatus.FORBIDDEN
