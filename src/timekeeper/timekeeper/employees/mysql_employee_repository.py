from __future__ import annotations

from typing import Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, employee_code, first_name, last_name, email, password_hash,
    role, pod_name, position, phone, address, is_active, created_at
"""

# Employee attribute -> column; only these may be written by update_fields.
_UPDATABLE = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "role": "role",
    "pod_name": "pod_name",
    "position": "position",
    "phone": "phone",
    "address": "address",
    "is_active": "is_active",
    "password_hash": "password_hash",
}


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r.get("employee_code"),
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        pod_name=r.get("pod_name"),
        position=r.get("position") or "",
        phone=r.get("phone"),
        address=r.get("address"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_employee_code(self, employee_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_code=%s", (employee_code,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_all(
        self,
        *,
        role: Optional[Role] = None,
        pod_name: Optional[str] = None,
        unassigned: bool = False,
    ) -> Sequence[Employee]:
        clauses = ["1=1"]
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if unassigned:
            clauses.append("pod_name IS NULL")
        elif pod_name is not None:
            clauses.append("pod_name=%s")
            params.append(pod_name)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE {" AND ".join(clauses)}
                ORDER BY last_name, first_name, employee_id
                """,
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        role: Role,
        pod_name: Optional[str],
        position: str,
        employee_code: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO employees(first_name, last_name, email, password_hash, role, pod_name, position, employee_code)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (first_name, last_name, email, password_hash, role.value, pod_name, position, employee_code),
                )
                return int(cur.lastrowid)
        except IntegrityError as err:
            if is_duplicate_key(err):
                raise ConflictError("An employee with this email or employee code already exists")
            raise

    def update_fields(self, employee_id: int, changes: Mapping[str, object]) -> bool:
        assignments = []
        params: list[object] = []
        for attr, value in changes.items():
            column = _UPDATABLE.get(attr)
            if column is None:
                raise KeyError(f"Unsupported employee field: {attr}")
            assignments.append(f"{column}=%s")
            params.append(value.value if isinstance(value, Role) else value)
        if not assignments:
            return False

        params.append(int(employee_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {', '.join(assignments)} WHERE employee_id=%s", tuple(params))
            return cur.rowcount > 0

    def count(self, *, role: Optional[Role] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute("SELECT COUNT(*) AS n FROM employees")
            else:
                cur.execute("SELECT COUNT(*) AS n FROM employees WHERE role=%s", (role.value,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def count_by_pod(self, *, role: Optional[Role] = None) -> Sequence[tuple[Optional[str], int]]:
        where = "WHERE role=%s" if role is not None else ""
        params = (role.value,) if role is not None else ()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT pod_name, COUNT(*) AS n FROM employees {where} GROUP BY pod_name",
                params,
            )
            return [(r.get("pod_name"), int(r["n"])) for r in fetchall(cur)]

    def count_in_pod(self, pod_name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees WHERE pod_name=%s", (pod_name,))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def delete_cascade(self, employee_id: int) -> bool:
        employee_id = int(employee_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timecards WHERE employee_id=%s", (employee_id,))
            cur.execute("DELETE FROM leave_requests WHERE employee_id=%s", (employee_id,))
            cur.execute("UPDATE leave_requests SET approver_id=NULL WHERE approver_id=%s", (employee_id,))
            cur.execute("DELETE FROM tasks WHERE assigned_to_id=%s", (employee_id,))
            cur.execute("UPDATE tasks SET assigned_by_id=NULL WHERE assigned_by_id=%s", (employee_id,))
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (employee_id,))
            return cur.rowcount > 0
