# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from uni_schedule.application.services.auth_service import AuthService
from uni_schedule.application.services.class_service import ClassService
from uni_schedule.domain.schedules.entities import (CLEARABLE_FIELDS, CreateClassDTO,
                                                      UpdateClassDTO)
from uni_schedule.interfaces.http.auth import auth_required, current_user_id
from uni_schedule.interfaces.http.dto.schedules import (ClassDTO, CreateClassRequestDTO,
                                                        CreatedDTO, OkDTO,
                                                        UpdateClassRequestDTO)
from uni_schedule.interfaces.http.parsing import parse_body


class ClassesController:
    def __init__(self, *, class_service: ClassService, auth_service: AuthService) -> None:
        self._class_service = class_service
        self._auth_service = auth_service

    @auth_required
    def create(self) -> tuple[Response, int]:
        dto = parse_body(CreateClassRequestDTO)
        class_id = self._class_service.create(CreateClassDTO(**dto.model_dump()))
        return jsonify(CreatedDTO(id=class_id).model_dump()), 201

    def get(self, class_id: int) -> tuple[Response, int]:
        entry = self._class_service.get_by_id(class_id)
        return jsonify(ClassDTO.model_validate(entry).model_dump(mode="json")), 200

    def list_for_schedule(self, schedule_id: int) -> tuple[Response, int]:
        views = self._class_service.get_all(schedule_id)
        items = [
            ClassDTO.model_validate(view).model_dump(mode="json", exclude={"schedule_id"})
            for view in views
        ]
        return jsonify({"items": items, "total": len(items)}), 200

    @auth_required
    def update(self, class_id: int) -> tuple[Response, int]:
        dto = parse_body(UpdateClassRequestDTO)
        provided = dto.model_dump(exclude_unset=True)
        update = UpdateClassDTO(
            **{field: value for field, value in provided.items() if value is not None},
            cleared=frozenset(
                field for field in CLEARABLE_FIELDS if provided.get(field, "") is None
            ),
        )
        self._class_service.update(current_user_id(), class_id, update)
        return jsonify(OkDTO().model_dump()), 200

    @auth_required
    def delete(self, class_id: int) -> tuple[Response, int]:
        self._class_service.delete(current_user_id(), class_id)
        return jsonify(OkDTO().model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("classes", __name__, url_prefix="/api")
        bp.add_url_rule("/classes", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/classes/<int:class_id>", view_func=self.get, methods=["GET"])
        bp.add_url_rule("/classes/<int:class_id>", view_func=self.update, methods=["PATCH"])
        bp.add_url_rule("/classes/<int:class_id>", view_func=self.delete, methods=["DELETE"])
        bp.add_url_rule(
            "/schedules/<int:schedule_id>/classes",
            view_func=self.list_for_schedule,
            methods=["GET"],
        )
        return bp
