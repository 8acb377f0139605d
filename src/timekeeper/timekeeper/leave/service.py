from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_date_range, require_enum, require_non_empty, require_positive_int
from ..core.enums import LeaveType, ReviewStatus
from ..core.exceptions import AlreadyReviewed, AuthorizationError, NotFoundError, ValidationError
from ..core.identity import Identity
from ..employees.repository import EmployeeRepository
from .model import LeaveRequest, NewLeaveRequest, derive_day_count
from .overlap import LeaveOverlapChecker
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leave: LeaveRepository, employees: EmployeeRepository):
        self._leave = leave
        self._employees = employees
        self._overlap = LeaveOverlapChecker(leave)

    def has_conflict(self, employee_id: int, start_date: date, end_date: date) -> bool:
        return self._overlap.has_conflict(employee_id, start_date, end_date)

    def submit(
        self,
        *,
        current: Identity,
        start_date: date,
        end_date: date,
        leave_type,
        reason: str,
        backup_delegate: Optional[str] = None,
        day_count=None,
    ) -> LeaveRequest:
        require_date_range(start_date, end_date)
        kind = require_enum(LeaveType, leave_type, "leave type")
        reason = require_non_empty(reason, "Reason")
        days = (
            require_positive_int(day_count, "Day count")
            if day_count not in (None, "")
            else derive_day_count(start_date, end_date)
        )

        self._overlap.ensure_free(current.employee_id, start_date, end_date)

        created = self._leave.create(
            NewLeaveRequest(
                employee_id=current.employee_id,
                leave_type=kind,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                backup_delegate=(backup_delegate or "").strip() or None,
                day_count=days,
            )
        )
        logger.info(
            "Leave request %s submitted by %s (%s..%s, %s days)",
            created.request_id,
            current.employee_id,
            start_date,
            end_date,
            days,
        )
        return created

    def _require(self, request_id: int) -> LeaveRequest:
        request = self._leave.get_by_id(int(request_id))
        if not request:
            raise NotFoundError("Leave request not found")
        return request

    def get(self, *, current: Identity, request_id: int) -> LeaveRequest:
        request = self._require(request_id)
        if not (current.is_elevated or current.owns(request.employee_id)):
            raise AuthorizationError("You can only access your own resources")
        return request

    def list_requests(
        self,
        *,
        current: Identity,
        status=None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Admins see every request; everyone else only their own."""

        wanted = require_enum(ReviewStatus, status, "status") if status else None
        if start_date is not None and end_date is not None:
            require_date_range(start_date, end_date)
        return self._leave.list_requests(
            status=wanted,
            employee_id=None if current.is_admin else current.employee_id,
            start_date=start_date,
            end_date=end_date,
        )

    def review(self, *, current: Identity, request_id: int, decision, notes: Optional[str] = None) -> LeaveRequest:
        if not current.is_elevated:
            raise AuthorizationError("Only managers and admins can review leave requests")

        status = require_enum(ReviewStatus, decision, "status")
        if status == ReviewStatus.PENDING:
            raise ValidationError("Invalid status: a review must approve or reject")

        request = self._require(request_id)
        if not request.is_pending:
            raise AlreadyReviewed(f"Leave request has already been {request.status.value}")

        notes = (notes or "").strip() or None
        if not self._leave.decide(
            request_id=request.request_id,
            status=status,
            approver_id=current.employee_id,
            reviewer_notes=notes,
        ):
            raise AlreadyReviewed("Leave request has already been reviewed")

        logger.info("Leave request %s %s by %s", request.request_id, status.value, current.employee_id)
        return self._require(request.request_id)

    def cancel(self, *, current: Identity, request_id: int) -> None:
        request = self._require(request_id)
        if not (current.is_admin or current.owns(request.employee_id)):
            raise AuthorizationError("You can only access your own resources")
        if not request.is_pending or not self._leave.delete_pending(request.request_id):
            raise AlreadyReviewed("Cannot cancel a processed leave request")
        logger.info("Leave request %s cancelled by %s", request.request_id, current.employee_id)

    def _with_requester(self, request: LeaveRequest, employee) -> dict:
        row = request.to_dict()
        row["employeeName"] = employee.full_name if employee else None
        row["podName"] = employee.pod_name if employee else None
        return row

    def _require_reviewer(self, current: Identity) -> None:
        if not current.is_elevated:
            raise AuthorizationError("Access restricted to manager or admin roles")

    def list_for_review(self, *, current: Identity) -> list[dict]:
        """Manager view: every request with the requester's name and POD."""

        self._require_reviewer(current)
        names = {e.employee_id: e for e in self._employees.list_all()}
        return [self._with_requester(r, names.get(r.employee_id)) for r in self._leave.list_requests()]

    def get_for_review(self, *, current: Identity, request_id: int) -> dict:
        self._require_reviewer(current)
        request = self._require(request_id)
        return self._with_requester(request, self._employees.get_by_id(request.employee_id))
