from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import AttendanceLabel


@dataclass(frozen=True)
class DayAttendance:
    """One calendar cell: the attendance label of one day."""

    day: date
    label: AttendanceLabel

    @property
    def is_workday(self) -> bool:
        return self.label != AttendanceLabel.WEEKEND

    def to_dict(self) -> dict:
        return {"date": self.day.isoformat(), "label": self.label.value}
