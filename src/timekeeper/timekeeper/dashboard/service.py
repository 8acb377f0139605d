from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.classifier import AttendanceClassifier
from ..common.datetime_utils import is_workday, now_local
from ..common.validators import require_date_range, require_non_empty
from ..core.constants import UNASSIGNED_POD
from ..core.enums import ClockState, ReviewStatus, Role
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from ..leave.repository import LeaveRepository
from ..pods.repository import PodRepository
from ..tasks.repository import TaskRepository
from ..timecards.repository import TimecardRepository
from .model import DAY_BUCKETS, DashboardStats, EmployeeCalendar, EmployeeStatus, PodCalendar, PodStat


class DashboardService:
    """Read-only aggregations for the manager dashboard.

    Everything is computed from current rows on each call; nothing is cached
    or stored. Headcounts only include the ``employee`` role.
    """

    def __init__(
        self,
        *,
        employees: EmployeeRepository,
        timecards: TimecardRepository,
        leave: LeaveRepository,
        tasks: TaskRepository,
        pods: PodRepository,
        classifier: Optional[AttendanceClassifier] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._timecards = timecards
        self._leave = leave
        self._tasks = tasks
        self._pods = pods
        self._classifier = classifier or AttendanceClassifier()
        self._clock = clock

    def dashboard_stats(self, as_of: date | None = None) -> DashboardStats:
        as_of = as_of or self._clock().date()
        return DashboardStats(
            total_employees=self._employees.count(role=Role.EMPLOYEE),
            clocked_in_count=self._timecards.count_open_for_date(as_of),
            pending_leave_count=self._leave.count_by_status(ReviewStatus.PENDING),
            tasks_in_progress_count=self._tasks.count_in_progress(as_of),
        )

    def pod_stats(self) -> list[PodStat]:
        counts: dict[str, int] = defaultdict(int)
        for pod_name, n in self._employees.count_by_pod(role=Role.EMPLOYEE):
            counts[pod_name or UNASSIGNED_POD] += n
        stats = [PodStat(pod_name=name, employee_count=n) for name, n in counts.items()]
        stats.sort(key=lambda s: (-s.employee_count, s.pod_name))
        return stats

    def employee_statuses(self, today: date | None = None) -> list[EmployeeStatus]:
        today = today or self._clock().date()
        employees = self._employees.list_all(role=Role.EMPLOYEE)
        records = self._timecards.list_in_range(
            start_date=today,
            end_date=today,
            employee_ids=[e.employee_id for e in employees],
        ) if employees else []
        by_employee = {r.employee_id: r for r in records}

        out: list[EmployeeStatus] = []
        for e in employees:
            record = by_employee.get(e.employee_id)
            clocked_in = record is not None and record.is_open
            out.append(
                EmployeeStatus(
                    employee_id=e.employee_id,
                    full_name=e.full_name,
                    pod_name=e.pod_name,
                    status=ClockState.CLOCKED_IN if clocked_in else ClockState.CLOCKED_OUT,
                    last_clock_in=record.clock_in_at if record else None,
                    last_clock_out=record.clock_out_at if record else None,
                    current_location=(record.location or self._classifier.default_location) if clocked_in else None,
                )
            )
        return out

    def pod_attendance_calendar(self, pod_name: str, start: date, end: date) -> PodCalendar:
        """Calendar for one POD; ``Unassigned`` covers employees with no POD,
        matching the bucket reported by ``pod_stats``."""

        pod_name = require_non_empty(pod_name, "POD name")
        require_date_range(start, end)
        if pod_name == UNASSIGNED_POD:
            members = self._employees.list_all(unassigned=True)
        elif self._pods.exists(pod_name):
            members = self._employees.list_all(pod_name=pod_name)
        else:
            raise NotFoundError(f"POD not found: {pod_name}")
        return self._build_calendar(pod_name, start, end, members)

    def _build_calendar(self, pod_name: str, start: date, end: date, members: Sequence) -> PodCalendar:
        records = self._timecards.list_in_range(
            start_date=start,
            end_date=end,
            employee_ids=[m.employee_id for m in members],
        ) if members else []
        per_employee: dict[int, list] = defaultdict(list)
        for r in records:
            per_employee[r.employee_id].append(r)

        rows: list[EmployeeCalendar] = []
        by_day: dict[date, dict[str, list[int]]] = {}
        for m in members:
            days = tuple(self._classifier.classify(start, end, per_employee.get(m.employee_id, ())))
            rows.append(EmployeeCalendar(employee_id=m.employee_id, full_name=m.full_name, days=days))
            for cell in days:
                if not is_workday(cell.day):
                    continue
                buckets = by_day.setdefault(cell.day, {name: [] for name in DAY_BUCKETS.values()})
                buckets[DAY_BUCKETS[cell.label]].append(m.employee_id)

        return PodCalendar(pod_name=pod_name, start=start, end=end, employees=tuple(rows), by_day=by_day)
