from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import LeaveType, ReviewStatus


def derive_day_count(start_date: date, end_date: date) -> int:
    """Calendar days covered by an inclusive range."""
    return abs((end_date - start_date).days) + 1


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive interval overlap."""
    return a_start <= b_end and a_end >= b_start


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: ReviewStatus
    backup_delegate: Optional[str] = None
    day_count: Optional[int] = None
    reviewer_notes: Optional[str] = None
    approver_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ReviewStatus.PENDING

    @property
    def effective_day_count(self) -> int:
        return self.day_count or derive_day_count(self.start_date, self.end_date)

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "employeeId": self.employee_id,
            "leaveType": self.leave_type.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "reason": self.reason,
            "backupDelegate": self.backup_delegate,
            "dayCount": self.effective_day_count,
            "status": self.status.value,
            "reviewerNotes": self.reviewer_notes,
            "approverId": self.approver_id,
            "createdAt": isoformat_or_none(self.created_at),
        }


@dataclass(frozen=True)
class NewLeaveRequest:
    """Validated input for a submission."""

    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    backup_delegate: Optional[str]
    day_count: int
