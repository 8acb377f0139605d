from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_date_range, require_enum
from ..core.enums import ReviewStatus, WorkLocation
from ..core.exceptions import (
    AlreadyClockedIn,
    AlreadyClockedOut,
    AuthorizationError,
    NoActiveSession,
    NotFoundError,
    ValidationError,
)
from ..core.identity import Identity
from .model import TimeRecord, compute_total_hours
from .repository import TimecardRepository

logger = logging.getLogger(__name__)


def parse_location(value) -> Optional[WorkLocation]:
    """Accept "Home"/"office"/None; blank means not recorded."""

    if value is None or isinstance(value, WorkLocation):
        return value
    text = str(value).strip()
    if not text:
        return None
    return require_enum(WorkLocation, text.capitalize(), "location")


class ClockService:
    """Use cases around a single employee's daily timecard."""

    def __init__(self, timecards: TimecardRepository, *, clock: Callable[[], datetime] = now_local):
        self._timecards = timecards
        self._clock = clock

    def clock_in(self, employee_id: int, location=None, *, now: datetime | None = None) -> TimeRecord:
        now = now or self._clock()
        today = now.date()
        where = parse_location(location)

        existing = self._timecards.get_for_employee_and_date(employee_id, today)
        if existing:
            logger.info("Rejected clock-in for employee %s on %s: record %s exists", employee_id, today, existing.record_id)
            raise AlreadyClockedIn("Already clocked in today")

        record = self._timecards.create_clock_in(
            employee_id=employee_id,
            work_date=today,
            clock_in_at=now,
            location=where,
        )
        logger.info("Employee %s clocked in at %s (%s)", employee_id, now, where.value if where else "unspecified")
        return record

    def clock_out(self, employee_id: int, *, now: datetime | None = None) -> TimeRecord:
        now = now or self._clock()
        today = now.date()

        record = self._timecards.get_for_employee_and_date(employee_id, today)
        if not record:
            raise NoActiveSession("No clock-in record found for today")
        if record.clock_out_at is not None:
            raise AlreadyClockedOut("Already clocked out")
        if now <= record.clock_in_at:
            raise ValidationError("Clock-out time must be after clock-in time")

        total_hours = compute_total_hours(record.clock_in_at, now)
        closed = self._timecards.close_session(record_id=record.record_id, clock_out_at=now, total_hours=total_hours)
        if not closed:
            # Another request closed the session between our read and write.
            raise AlreadyClockedOut("Already clocked out")

        logger.info("Employee %s clocked out at %s (%s h)", employee_id, now, total_hours)
        return replace(record, clock_out_at=now, total_hours=total_hours)

    def review(self, *, current: Identity, record_id: int, decision, notes: Optional[str] = None) -> TimeRecord:
        if not current.is_elevated:
            raise AuthorizationError("Only managers and admins can review timecards")

        status = require_enum(ReviewStatus, decision, "status")
        if status == ReviewStatus.PENDING:
            raise ValidationError("Invalid status: a review must approve or reject")

        record = self._timecards.get_by_id(record_id)
        if not record:
            raise NotFoundError("Timecard not found")

        notes = (notes or "").strip() or None
        self._timecards.set_review_status(record_id=record.record_id, status=status, notes=notes)
        logger.info("Timecard %s %s by employee %s", record.record_id, status.value, current.employee_id)
        return replace(record, review_status=status, notes=notes or record.notes)

    def get_today(self, employee_id: int, *, today: date | None = None) -> Optional[TimeRecord]:
        today = today or self._clock().date()
        return self._timecards.get_for_employee_and_date(employee_id, today)

    def history(self, employee_id: int, *, start: date, end: date) -> Sequence[TimeRecord]:
        require_date_range(start, end)
        return self._timecards.list_in_range(start_date=start, end_date=end, employee_ids=[employee_id])

    def list_timecards(self, *, current: Identity, start: date, end: date) -> Sequence[TimeRecord]:
        """Admins see every employee; everyone else only their own records."""

        require_date_range(start, end)
        employee_ids = None if current.is_admin else [current.employee_id]
        return self._timecards.list_in_range(start_date=start, end_date=end, employee_ids=employee_ids)

    def list_for_employee(self, *, current: Identity, employee_id: int, start: date, end: date) -> Sequence[TimeRecord]:
        if not (current.is_elevated or current.owns(employee_id)):
            raise AuthorizationError("You can only access your own timecards")
        return self.history(employee_id, start=start, end=end)
