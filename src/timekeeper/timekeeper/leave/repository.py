from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ReviewStatus
from .model import LeaveRequest, NewLeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[ReviewStatus] = None,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Newest start date first; the date filter applies to start_date."""

        raise NotImplementedError

    def list_approved_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def create(self, request: NewLeaveRequest) -> LeaveRequest:
        """Insert a Pending request.

        Implementations re-run the approved-overlap test atomically with the
        insert and raise ``OverlappingLeave`` on conflict.
        """

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: ReviewStatus,
        approver_id: int,
        reviewer_notes: Optional[str] = None,
    ) -> bool:
        """Set a terminal status; False if the request is no longer Pending."""

        raise NotImplementedError

    def delete_pending(self, request_id: int) -> bool:
        raise NotImplementedError

    def count_by_status(self, status: ReviewStatus) -> int:
        raise NotImplementedError
