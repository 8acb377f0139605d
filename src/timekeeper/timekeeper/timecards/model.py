from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.constants import HOURS_QUANTUM, SECONDS_PER_HOUR
from ..core.enums import ReviewStatus, WorkLocation


def compute_total_hours(clock_in_at: datetime, clock_out_at: Optional[datetime]) -> Decimal:
    """Worked hours between two timestamps, clamped at 0, 2 decimals half-up."""
    if clock_out_at is None:
        return Decimal("0.00")
    seconds = Decimal(str((clock_out_at - clock_in_at).total_seconds()))
    hours = max(Decimal(0), seconds / SECONDS_PER_HOUR)
    return hours.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TimeRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    record_id: int
    employee_id: int
    work_date: date
    clock_in_at: datetime
    clock_out_at: Optional[datetime]
    location: Optional[WorkLocation]
    total_hours: Decimal
    review_status: ReviewStatus
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.clock_out_at is None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "employeeId": self.employee_id,
            "workDate": self.work_date.isoformat(),
            "clockInAt": self.clock_in_at.isoformat(),
            "clockOutAt": isoformat_or_none(self.clock_out_at),
            "location": self.location.value if self.location else None,
            "totalHours": float(self.total_hours),
            "reviewStatus": self.review_status.value,
            "notes": self.notes,
        }
