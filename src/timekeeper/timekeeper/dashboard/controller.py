from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_identity, parse_date_arg, roles_required
from ..container import Container
from ..core.enums import Role

_MANAGER_ROLES = (Role.MANAGER, Role.ADMIN)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/manager/dashboard-stats", methods=["GET"], endpoint="manager_dashboard_stats")
    @roles_required(*_MANAGER_ROLES)
    def dashboard_stats():
        stats = container.dashboard_service.dashboard_stats(container.clock().date())
        return jsonify(stats.to_dict())

    @app.route("/api/manager/pod-stats", methods=["GET"], endpoint="manager_pod_stats")
    @roles_required(*_MANAGER_ROLES)
    def pod_stats():
        return jsonify([s.to_dict() for s in container.dashboard_service.pod_stats()])

    @app.route("/api/manager/employee-statuses", methods=["GET"], endpoint="manager_employee_statuses")
    @roles_required(*_MANAGER_ROLES)
    def employee_statuses():
        statuses = container.dashboard_service.employee_statuses(container.clock().date())
        return jsonify([s.to_dict() for s in statuses])

    @app.route("/api/manager/pods/<path:pod_name>/attendance", methods=["GET"], endpoint="manager_pod_attendance")
    @roles_required(*_MANAGER_ROLES)
    def pod_attendance(pod_name: str):
        calendar = container.dashboard_service.pod_attendance_calendar(
            pod_name,
            parse_date_arg("startDate", required=True),
            parse_date_arg("endDate", required=True),
        )
        return jsonify(calendar.to_dict())

    @app.route("/api/manager/employees/<int:employee_id>", methods=["GET"], endpoint="manager_employee")
    @roles_required(*_MANAGER_ROLES)
    def employee(employee_id: int):
        found = container.employee_service.get(current=current_identity(), employee_id=employee_id)
        return jsonify(found.to_dict())

    @app.route("/api/manager/employees/<int:employee_id>/timecards", methods=["GET"], endpoint="manager_employee_timecards")
    @roles_required(*_MANAGER_ROLES)
    def employee_timecards(employee_id: int):
        records = container.clock_service.list_for_employee(
            current=current_identity(),
            employee_id=employee_id,
            start=parse_date_arg("startDate", required=True),
            end=parse_date_arg("endDate", required=True),
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/manager/employees/<int:employee_id>/attendance", methods=["GET"], endpoint="manager_employee_attendance")
    @roles_required(*_MANAGER_ROLES)
    def employee_attendance(employee_id: int):
        days = container.attendance_service.employee_calendar(
            current=current_identity(),
            employee_id=employee_id,
            start=parse_date_arg("startDate", required=True),
            end=parse_date_arg("endDate", required=True),
        )
        return jsonify([d.to_dict() for d in days])

    @app.route("/api/manager/timecards/summary", methods=["GET"], endpoint="manager_timecard_summary")
    @roles_required(*_MANAGER_ROLES)
    def timecard_summary():
        data = container.timecard_report_service.build_timecard_report(
            start=parse_date_arg("startDate", required=True),
            end=parse_date_arg("endDate", required=True),
        )
        return jsonify(
            [
                {
                    "employeeId": s["employee_id"],
                    "fullName": s["full_name"],
                    "days": s["days"],
                    "totalHours": s["total_hours"],
                }
                for s in data.summary
            ]
        )
