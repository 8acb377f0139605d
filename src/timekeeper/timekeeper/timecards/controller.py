from __future__ import annotations

import csv
import io
from datetime import timedelta

from flask import Flask, jsonify

from ..common.http import current_identity, json_body, login_required, parse_date_arg, roles_required
from ..container import Container
from ..core.enums import Role
from ..reports.service import REPORT_FIELDS


def register(app: Flask, container: Container) -> None:
    def _write_report_csv(*, data, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    def _history_range():
        today = container.clock().date()
        days = int(app.config.get("DEFAULT_HISTORY_DAYS", 30))
        start = parse_date_arg("startDate", today - timedelta(days=days))
        end = parse_date_arg("endDate", today)
        return start, end

    @app.route("/api/timecards/clock-in", methods=["POST"], endpoint="timecards_clock_in")
    @login_required
    def clock_in():
        body = json_body()
        record = container.clock_service.clock_in(current_identity().employee_id, body.get("location"))
        return jsonify(record.to_dict()), 201

    @app.route("/api/timecards/clock-out", methods=["POST"], endpoint="timecards_clock_out")
    @login_required
    def clock_out():
        record = container.clock_service.clock_out(current_identity().employee_id)
        return jsonify(record.to_dict())

    @app.route("/api/timecards/today", methods=["GET"], endpoint="timecards_today")
    @login_required
    def today():
        record = container.clock_service.get_today(current_identity().employee_id)
        return jsonify(record.to_dict() if record else None)

    @app.route("/api/timecards/history", methods=["GET"], endpoint="timecards_history")
    @login_required
    def history():
        start, end = _history_range()
        records = container.clock_service.history(current_identity().employee_id, start=start, end=end)
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/timecards", methods=["GET"], endpoint="timecards_list")
    @login_required
    def list_timecards():
        today = container.clock().date()
        start = parse_date_arg("startDate", today)
        end = parse_date_arg("endDate", today)
        records = container.clock_service.list_timecards(current=current_identity(), start=start, end=end)
        return jsonify([r.to_dict() for r in records])

    @app.route("/api/timecards/<int:record_id>/status", methods=["PATCH"], endpoint="timecards_review")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def review(record_id: int):
        body = json_body()
        record = container.clock_service.review(
            current=current_identity(),
            record_id=record_id,
            decision=body.get("status"),
            notes=body.get("notes"),
        )
        return jsonify(record.to_dict())

    @app.route("/api/timecards/export.csv", methods=["GET"], endpoint="timecards_export_csv")
    @login_required
    def export_csv():
        start, end = _history_range()
        data = container.timecard_report_service.build_timecard_report(
            start=start,
            end=end,
            employee_ids=[current_identity().employee_id],
        )
        filename = f"my_timecards_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_report_csv(data=data, filename=filename)
