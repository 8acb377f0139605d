from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify

from ..common.http import current_identity, login_required, parse_date_arg
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_calendar")
    @login_required
    def my_calendar():
        """Caller's own day-by-day attendance labels."""

        identity = current_identity()
        today = container.clock().date()
        start = parse_date_arg("startDate", today - timedelta(days=int(app.config.get("DEFAULT_HISTORY_DAYS", 30))))
        end = parse_date_arg("endDate", today)
        days = container.attendance_service.employee_calendar(
            current=identity,
            employee_id=identity.employee_id,
            start=start,
            end=end,
        )
        return jsonify([d.to_dict() for d in days])
