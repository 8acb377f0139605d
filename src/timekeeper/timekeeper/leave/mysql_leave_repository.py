from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveType, ReviewStatus
from ..core.exceptions import NotFoundError, OverlappingLeave
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, employee_id, leave_type, start_date, end_date, reason, backup_delegate,
    day_count, status, reviewer_notes, approver_id, created_at
"""

_OVERLAP_SQL = f"""
    SELECT {_COLUMNS}
    FROM leave_requests
    WHERE employee_id=%s AND status=%s AND start_date <= %s AND end_date >= %s
    ORDER BY start_date
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=ReviewStatus(r["status"]),
        backup_delegate=r.get("backup_delegate"),
        day_count=int(r["day_count"]) if r.get("day_count") is not None else None,
        reviewer_notes=r.get("reviewer_notes"),
        approver_id=int(r["approver_id"]) if r.get("approver_id") is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_request(row) if row else None

    def list_requests(
        self,
        *,
        status: Optional[ReviewStatus] = None,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if start_date is not None and end_date is not None:
            clauses.append("start_date BETWEEN %s AND %s")
            params.extend([start_date, end_date])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {" AND ".join(clauses)}
                ORDER BY start_date DESC, request_id DESC
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_approved_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_OVERLAP_SQL, (int(employee_id), ReviewStatus.APPROVED.value, end_date, start_date))
            return [_to_request(r) for r in fetchall(cur)]

    def create(self, request: NewLeaveRequest) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            # Serialize submissions and approvals for the same employee.
            cur.execute("SELECT employee_id FROM employees WHERE employee_id=%s FOR UPDATE", (request.employee_id,))
            if not fetchone(cur):
                raise NotFoundError("Employee not found")

            cur.execute(
                _OVERLAP_SQL,
                (request.employee_id, ReviewStatus.APPROVED.value, request.end_date, request.start_date),
            )
            if fetchall(cur):
                raise OverlappingLeave("You already have approved leave during this period")

            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, reason,
                                           backup_delegate, day_count, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.employee_id,
                    request.leave_type.value,
                    request.start_date,
                    request.end_date,
                    request.reason,
                    request.backup_delegate,
                    request.day_count,
                    ReviewStatus.PENDING.value,
                ),
            )
            request_id = int(cur.lastrowid)

        return LeaveRequest(
            request_id=request_id,
            employee_id=request.employee_id,
            leave_type=request.leave_type,
            start_date=request.start_date,
            end_date=request.end_date,
            reason=request.reason,
            status=ReviewStatus.PENDING,
            backup_delegate=request.backup_delegate,
            day_count=request.day_count,
        )

    def decide(
        self,
        *,
        request_id: int,
        status: ReviewStatus,
        approver_id: int,
        reviewer_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id FROM leave_requests WHERE request_id=%s",
                (int(request_id),),
            )
            row = fetchone(cur)
            if not row:
                return False
            cur.execute("SELECT employee_id FROM employees WHERE employee_id=%s FOR UPDATE", (int(row["employee_id"]),))
            fetchall(cur)
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approver_id=%s, reviewer_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, int(approver_id), reviewer_notes, int(request_id), ReviewStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete_pending(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM leave_requests WHERE request_id=%s AND status=%s",
                (int(request_id), ReviewStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def count_by_status(self, status: ReviewStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM leave_requests WHERE status=%s", (status.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0
