from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ReviewStatus, WorkLocation
from .model import TimeRecord


class TimecardRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[TimeRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in_at: datetime,
        location: Optional[WorkLocation],
    ) -> TimeRecord:
        """Insert an open record.

        Must raise ``AlreadyClockedIn`` when (employee_id, work_date) exists.
        """

        raise NotImplementedError

    def close_session(
        self,
        *,
        record_id: int,
        clock_out_at: datetime,
        total_hours: Decimal,
    ) -> bool:
        """Set clock-out and hours in one write; False if already closed."""

        raise NotImplementedError

    def set_review_status(self, *, record_id: int, status: ReviewStatus, notes: Optional[str] = None) -> bool:
        """Record the review decision; ``notes`` replaces stored notes only when given."""

        raise NotImplementedError

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[TimeRecord]:
        """Records with work_date in [start_date, end_date], newest first."""

        raise NotImplementedError

    def count_open_for_date(self, work_date: date) -> int:
        raise NotImplementedError
