from __future__ import annotations

from datetime import date

from ..common.validators import require_date_range
from ..core.exceptions import OverlappingLeave
from .repository import LeaveRepository


class LeaveOverlapChecker:
    """Approved leave blocks new requests on overlapping days.

    Pending and Rejected requests never block.
    """

    def __init__(self, leave: LeaveRepository):
        self._leave = leave

    def has_conflict(self, employee_id: int, new_start: date, new_end: date) -> bool:
        require_date_range(new_start, new_end)
        return bool(
            self._leave.list_approved_overlapping(employee_id=employee_id, start_date=new_start, end_date=new_end)
        )

    def ensure_free(self, employee_id: int, new_start: date, new_end: date) -> None:
        if self.has_conflict(employee_id, new_start, new_end):
            raise OverlappingLeave("You already have approved leave during this period")
