from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.constants import WEEKEND_DAYS
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Full ISO timestamps (``2025-01-10T00:00:00.000Z``) sent by browsers are
    accepted too; only the calendar part is kept.
    """
    try:
        return datetime.strptime((value or "").strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in ``[start, end]``."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def is_workday(day: date) -> bool:
    return day.weekday() not in WEEKEND_DAYS


def isoformat_or_none(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
