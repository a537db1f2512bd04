# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from uni_schedule.application.services.auth_service import AuthService
from uni_schedule.application.services.schedule_service import ScheduleService
from uni_schedule.interfaces.http.auth import auth_required, current_user_id
from uni_schedule.interfaces.http.dto.schedules import (CreatedDTO, CreateScheduleRequestDTO,
                                                        OkDTO, ScheduleDTO)
from uni_schedule.interfaces.http.parsing import parse_body


class SchedulesController:
    def __init__(self, *, schedule_service: ScheduleService, auth_service: AuthService) -> None:
        self._schedule_service = schedule_service
        self._auth_service = auth_service

    @auth_required
    def create(self) -> tuple[Response, int]:
        dto = parse_body(CreateScheduleRequestDTO)
        schedule_id = self._schedule_service.create(current_user_id(), dto.title)
        return jsonify(CreatedDTO(id=schedule_id).model_dump()), 201

    @auth_required
    def list_own(self) -> tuple[Response, int]:
        items = [
            ScheduleDTO.model_validate(s).model_dump(mode="json")
            for s in self._schedule_service.list_for_user(current_user_id())
        ]
        return jsonify({"items": items}), 200

    def get(self, schedule_id: int) -> tuple[Response, int]:
        schedule = self._schedule_service.get_by_id(schedule_id)
        return jsonify(ScheduleDTO.model_validate(schedule).model_dump(mode="json")), 200

    @auth_required
    def delete(self, schedule_id: int) -> tuple[Response, int]:
        self._schedule_service.delete(current_user_id(), schedule_id)
        return jsonify(OkDTO().model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("schedules", __name__, url_prefix="/api/schedules")
        bp.add_url_rule("", view_func=self.create, methods=["POST"])
        bp.add_url_rule("", view_func=self.list_own, methods=["GET"])
        bp.add_url_rule("/<int:schedule_id>", view_func=self.get, methods=["GET"])
        bp.add_url_rule("/<int:schedule_id>", view_func=self.delete, methods=["DELETE"])
        return bp
