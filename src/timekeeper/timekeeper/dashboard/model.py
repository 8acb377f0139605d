from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..attendance.model import DayAttendance
from ..common.datetime_utils import isoformat_or_none
from ..core.enums import AttendanceLabel, ClockState, WorkLocation


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    clocked_in_count: int
    pending_leave_count: int
    tasks_in_progress_count: int

    def to_dict(self) -> dict:
        return {
            "totalEmployees": self.total_employees,
            "clockedInCount": self.clocked_in_count,
            "pendingLeaveCount": self.pending_leave_count,
            "tasksInProgressCount": self.tasks_in_progress_count,
        }


@dataclass(frozen=True)
class PodStat:
    pod_name: str
    employee_count: int

    def to_dict(self) -> dict:
        return {"podName": self.pod_name, "employeeCount": self.employee_count}


@dataclass(frozen=True)
class EmployeeStatus:
    employee_id: int
    full_name: str
    pod_name: Optional[str]
    status: ClockState
    last_clock_in: Optional[datetime] = None
    last_clock_out: Optional[datetime] = None
    current_location: Optional[WorkLocation] = None

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "name": self.full_name,
            "podName": self.pod_name,
            "status": self.status.value,
            "lastClockIn": isoformat_or_none(self.last_clock_in),
            "lastClockOut": isoformat_or_none(self.last_clock_out),
            "currentLocation": self.current_location.value if self.current_location else None,
        }


@dataclass(frozen=True)
class EmployeeCalendar:
    employee_id: int
    full_name: str
    days: tuple[DayAttendance, ...]

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "name": self.full_name,
            "days": [d.to_dict() for d in self.days],
        }


@dataclass(frozen=True)
class PodCalendar:
    """Per-employee rows plus a per-day index of who was where."""

    pod_name: str
    start: date
    end: date
    employees: tuple[EmployeeCalendar, ...]
    by_day: dict[date, dict[str, list[int]]] = field(default_factory=dict)

    @property
    def cell_count(self) -> int:
        return sum(1 for e in self.employees for d in e.days if d.is_workday)

    def to_dict(self) -> dict:
        return {
            "podName": self.pod_name,
            "startDate": self.start.isoformat(),
            "endDate": self.end.isoformat(),
            "employees": [e.to_dict() for e in self.employees],
            "days": {day.isoformat(): buckets for day, buckets in self.by_day.items()},
        }


# Calendar bucket per attendance label; weekends have no bucket.
DAY_BUCKETS = {
    AttendanceLabel.PRESENT_OFFICE: "present",
    AttendanceLabel.PRESENT_HOME: "home",
    AttendanceLabel.ABSENT: "absent",
}
