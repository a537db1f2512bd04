# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services import AuthService, ClassService, ScheduleService, WerkzeugPasswordHasher

__all__ = [
    "AuthService",
    "ClassService",
    "ScheduleService",
    "WerkzeugPasswordHasher",
]
