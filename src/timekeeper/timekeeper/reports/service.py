from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..common.validators import require_date_range
from ..core.constants import HOURS_QUANTUM
from ..employees.repository import EmployeeRepository
from ..timecards.repository import TimecardRepository

REPORT_FIELDS = [
    "work_date",
    "employee_id",
    "full_name",
    "pod_name",
    "clock_in",
    "clock_out",
    "location",
    "worked_hours",
    "review_status",
    "notes",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class TimecardReportService:
    def __init__(self, timecards: TimecardRepository, employees: EmployeeRepository):
        self._timecards = timecards
        self._employees = employees

    def build_timecard_report(
        self,
        *,
        start: date,
        end: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> ReportData:
        require_date_range(start, end)
        records = self._timecards.list_in_range(start_date=start, end_date=end, employee_ids=employee_ids)

        people = {}
        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in records:
            if r.employee_id not in people:
                people[r.employee_id] = self._employees.get_by_id(r.employee_id)
            employee = people[r.employee_id]
            full_name = employee.full_name if employee else ""

            out_rows.append(
                {
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "employee_id": r.employee_id,
                    "full_name": full_name,
                    "pod_name": (employee.pod_name if employee else None) or "-",
                    "clock_in": r.clock_in_at.strftime("%H:%M"),
                    "clock_out": r.clock_out_at.strftime("%H:%M") if r.clock_out_at else "-",
                    "location": r.location.value if r.location else "-",
                    "worked_hours": f"{r.total_hours:.2f}",
                    "review_status": r.review_status.value,
                    "notes": r.notes or "",
                }
            )

            s = summary_map.get(r.employee_id)
            if not s:
                s = {
                    "employee_id": r.employee_id,
                    "full_name": full_name,
                    "days": 0,
                    "total_hours": Decimal("0"),
                }
                summary_map[r.employee_id] = s
            s["days"] += 1
            s["total_hours"] += r.total_hours

        summary = [
            {
                "employee_id": s["employee_id"],
                "full_name": s["full_name"],
                "days": s["days"],
                "total_hours": f"{s['total_hours'].quantize(HOURS_QUANTUM):.2f}",
            }
            for s in summary_map.values()
        ]
        summary.sort(key=lambda x: Decimal(x["total_hours"]), reverse=True)
        return ReportData(rows=out_rows, summary=summary)
