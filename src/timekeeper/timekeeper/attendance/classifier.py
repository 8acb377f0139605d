from __future__ import annotations

from datetime import date
from typing import Iterable, Iterator, Mapping, Optional

from ..common.datetime_utils import is_workday, iter_days
from ..common.validators import require_date_range
from ..core.enums import AttendanceLabel, WorkLocation
from ..timecards.model import TimeRecord
from .model import DayAttendance


class AttendanceClassifier:
    """Label each day of a range as weekend, present (office/home) or absent.

    A record with no location is shown as Office. The source data does not
    distinguish "not recorded" from "Office", so this default is kept as-is.
    """

    default_location = WorkLocation.OFFICE

    def label_for(self, day: date, record: Optional[TimeRecord]) -> AttendanceLabel:
        if not is_workday(day):
            return AttendanceLabel.WEEKEND
        if record is None:
            return AttendanceLabel.ABSENT
        location = record.location or self.default_location
        if location == WorkLocation.HOME:
            return AttendanceLabel.PRESENT_HOME
        return AttendanceLabel.PRESENT_OFFICE

    def classify(self, start: date, end: date, records: Iterable[TimeRecord]) -> Iterator[DayAttendance]:
        """Lazily yield one ``DayAttendance`` per day in ``[start, end]``.

        ``records`` must belong to a single employee. The range is checked
        eagerly so ``InvalidRange`` surfaces at call time, not on first
        iteration.
        """

        require_date_range(start, end)
        by_day = {r.work_date: r for r in records if start <= r.work_date <= end}
        return self._iter_labels(start, end, by_day)

    def _iter_labels(self, start: date, end: date, by_day: Mapping[date, TimeRecord]) -> Iterator[DayAttendance]:
        for day in iter_days(start, end):
            yield DayAttendance(day=day, label=self.label_for(day, by_day.get(day)))
