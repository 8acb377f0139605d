from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import ReviewStatus, WorkLocation
from ..core.exceptions import AlreadyClockedIn
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, in_clause, is_duplicate_key
from .model import TimeRecord
from .repository import TimecardRepository

_COLUMNS = """
    record_id, employee_id, work_date, clock_in_at, clock_out_at,
    location, total_hours, review_status, notes
"""


def _to_record(r: dict) -> TimeRecord:
    return TimeRecord(
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in_at=r["clock_in_at"],
        clock_out_at=r.get("clock_out_at"),
        location=WorkLocation(r["location"]) if r.get("location") else None,
        total_hours=as_decimal(r.get("total_hours"), Decimal("0.00")),
        review_status=ReviewStatus(r["review_status"]),
        notes=r.get("notes"),
    )


class MySQLTimecardRepository(TimecardRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM timecards WHERE record_id=%s", (int(record_id),))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM timecards WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            row = fetchone(cur)
            return _to_record(row) if row else None

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        clock_in_at: datetime,
        location: Optional[WorkLocation],
    ) -> TimeRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO timecards(employee_id, work_date, clock_in_at, location, total_hours, review_status)
                    VALUES(%s,%s,%s,%s,0,%s)
                    """,
                    (
                        int(employee_id),
                        work_date,
                        clock_in_at,
                        location.value if location else None,
                        ReviewStatus.PENDING.value,
                    ),
                )
                record_id = int(cur.lastrowid)
        except IntegrityError as err:
            # uq_timecards_employee_day settles concurrent double submissions.
            if is_duplicate_key(err):
                raise AlreadyClockedIn("Already clocked in today")
            raise

        return TimeRecord(
            record_id=record_id,
            employee_id=int(employee_id),
            work_date=work_date,
            clock_in_at=clock_in_at,
            clock_out_at=None,
            location=location,
            total_hours=Decimal("0.00"),
            review_status=ReviewStatus.PENDING,
        )

    def close_session(self, *, record_id: int, clock_out_at: datetime, total_hours: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE timecards
                SET clock_out_at=%s, total_hours=%s
                WHERE record_id=%s AND clock_out_at IS NULL
                """,
                (clock_out_at, total_hours, int(record_id)),
            )
            return cur.rowcount > 0

    def set_review_status(self, *, record_id: int, status: ReviewStatus, notes: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE timecards SET review_status=%s, notes=COALESCE(%s, notes) WHERE record_id=%s",
                (status.value, notes, int(record_id)),
            )
            return cur.rowcount > 0

    def list_in_range(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[TimeRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"employee_id IN ({in_clause(employee_ids)})")
            params.extend(int(e) for e in employee_ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timecards
                WHERE {where}
                ORDER BY work_date DESC, clock_in_at DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_open_for_date(self, work_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM timecards WHERE work_date=%s AND clock_out_at IS NULL",
                (work_date,),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0
