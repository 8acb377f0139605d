from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_identity, json_body, login_required, parse_date_arg, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _required_date(body: dict, key: str):
        value = body.get(key)
        if not value:
            raise ValidationError(f"{key} is required")
        return parse_iso_date(str(value))

    @app.route("/api/leave", methods=["POST"], endpoint="leave_submit")
    @login_required
    def submit():
        body = json_body()
        created = container.leave_service.submit(
            current=current_identity(),
            start_date=_required_date(body, "startDate"),
            end_date=_required_date(body, "endDate"),
            leave_type=body.get("leaveType") or body.get("type"),
            reason=body.get("reason"),
            backup_delegate=body.get("backupDelegate") or body.get("backupSpoke"),
            day_count=body.get("dayCount"),
        )
        return jsonify(created.to_dict()), 201

    @app.route("/api/leave", methods=["GET"], endpoint="leave_list")
    @login_required
    def list_requests():
        requests = container.leave_service.list_requests(
            current=current_identity(),
            status=request.args.get("status") or None,
            start_date=parse_date_arg("startDate"),
            end_date=parse_date_arg("endDate"),
        )
        return jsonify([r.to_dict() for r in requests])

    @app.route("/api/leave/<int:request_id>", methods=["GET"], endpoint="leave_get")
    @login_required
    def get_request(request_id: int):
        return jsonify(container.leave_service.get(current=current_identity(), request_id=request_id).to_dict())

    @app.route("/api/leave/<int:request_id>/status", methods=["PATCH"], endpoint="leave_review")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def review(request_id: int):
        body = json_body()
        updated = container.leave_service.review(
            current=current_identity(),
            request_id=request_id,
            decision=body.get("status"),
            notes=body.get("notes"),
        )
        return jsonify(updated.to_dict())

    @app.route("/api/leave/<int:request_id>", methods=["DELETE"], endpoint="leave_cancel")
    @login_required
    def cancel(request_id: int):
        container.leave_service.cancel(current=current_identity(), request_id=request_id)
        return jsonify({"message": "Leave request cancelled"})

    @app.route("/api/manager/leave-requests", methods=["GET"], endpoint="manager_leave_requests")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def manager_requests():
        return jsonify(container.leave_service.list_for_review(current=current_identity()))

    @app.route("/api/manager/leave-requests/<int:request_id>", methods=["GET"], endpoint="manager_leave_request")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def manager_request(request_id: int):
        return jsonify(container.leave_service.get_for_review(current=current_identity(), request_id=request_id))

    @app.route("/api/manager/leave-requests/<int:request_id>/review", methods=["PUT"], endpoint="manager_leave_review")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def manager_review(request_id: int):
        body = json_body()
        updated = container.leave_service.review(
            current=current_identity(),
            request_id=request_id,
            decision=body.get("status"),
            notes=body.get("notes") or body.get("reviewerNotes"),
        )
        return jsonify(updated.to_dict())
