# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth_service import AuthService
from .class_service import ClassService
from .password_hashing import WerkzeugPasswordHasher
from .schedule_service import ScheduleService

__all__ = [
    "AuthService",
    "ClassService",
    "ScheduleService",
    "WerkzeugPasswordHasher",
]
