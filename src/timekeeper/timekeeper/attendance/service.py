from __future__ import annotations

from datetime import date

from ..common.validators import require_date_range
from ..core.exceptions import AuthorizationError, NotFoundError
from ..core.identity import Identity
from ..employees.repository import EmployeeRepository
from ..timecards.repository import TimecardRepository
from .classifier import AttendanceClassifier
from .model import DayAttendance


class AttendanceService:
    def __init__(
        self,
        timecards: TimecardRepository,
        employees: EmployeeRepository,
        *,
        classifier: AttendanceClassifier | None = None,
    ):
        self._timecards = timecards
        self._employees = employees
        self._classifier = classifier or AttendanceClassifier()

    def employee_calendar(self, *, current: Identity, employee_id: int, start: date, end: date) -> list[DayAttendance]:
        if not (current.is_elevated or current.owns(employee_id)):
            raise AuthorizationError("You can only access your own attendance")
        require_date_range(start, end)
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        records = self._timecards.list_in_range(start_date=start, end_date=end, employee_ids=[int(employee_id)])
        return list(self._classifier.classify(start, end, records))
