from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import TaskPriority, TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import NewTask, Task
from .repository import TaskRepository

_COLUMNS = """
    task_id, title, description, assigned_to_id, assigned_by_id, status, priority,
    start_date, due_date, created_date, estimated_hours, completed_at
"""

# Task attribute -> column; only these may be written by update_fields.
_UPDATABLE = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "start_date": "start_date",
    "due_date": "due_date",
    "estimated_hours": "estimated_hours",
    "assigned_to_id": "assigned_to_id",
    "status": "status",
}


def _to_task(r: dict) -> Task:
    return Task(
        task_id=int(r["task_id"]),
        title=r["title"],
        description=r.get("description") or "",
        assigned_to_id=int(r["assigned_to_id"]),
        assigned_by_id=int(r["assigned_by_id"]) if r.get("assigned_by_id") is not None else None,
        status=TaskStatus(r["status"]),
        priority=TaskPriority(r["priority"]),
        start_date=r.get("start_date"),
        due_date=r["due_date"],
        created_date=r["created_date"],
        estimated_hours=as_decimal(r.get("estimated_hours")),
        completed_at=r.get("completed_at"),
    )


def _column_value(value):
    if isinstance(value, (TaskStatus, TaskPriority)):
        return value.value
    return value


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, task_id: int) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (int(task_id),))
            row = fetchone(cur)
            return _to_task(row) if row else None

    def list_tasks(
        self,
        *,
        assigned_to_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        created_from: Optional[date] = None,
        created_to: Optional[date] = None,
    ) -> Sequence[Task]:
        clauses = ["1=1"]
        params: list[object] = []
        if assigned_to_id is not None:
            clauses.append("assigned_to_id=%s")
            params.append(int(assigned_to_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if priority is not None:
            clauses.append("priority=%s")
            params.append(priority.value)
        if created_from is not None:
            clauses.append("created_date >= %s")
            params.append(created_from)
        if created_to is not None:
            clauses.append("created_date <= %s")
            params.append(created_to)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM tasks
                WHERE {" AND ".join(clauses)}
                ORDER BY due_date, created_date DESC, task_id DESC
                """,
                tuple(params),
            )
            return [_to_task(r) for r in fetchall(cur)]

    def create(self, task: NewTask) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO tasks(title, description, assigned_to_id, assigned_by_id, status, priority,
                                  start_date, due_date, created_date, estimated_hours)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    task.title,
                    task.description,
                    task.assigned_to_id,
                    task.assigned_by_id,
                    TaskStatus.TODO.value,
                    task.priority.value,
                    task.start_date,
                    task.due_date,
                    task.created_date,
                    task.estimated_hours,
                ),
            )
            return int(cur.lastrowid)

    def update_status(
        self,
        *,
        task_id: int,
        status: TaskStatus,
        completed_at: Optional[datetime],
        expected_status: Optional[TaskStatus] = None,
    ) -> bool:
        sql = "UPDATE tasks SET status=%s, completed_at=%s WHERE task_id=%s"
        params: list[object] = [status.value, completed_at, int(task_id)]
        if expected_status is not None:
            sql += " AND status=%s"
            params.append(expected_status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def update_fields(self, task_id: int, changes: Mapping[str, object]) -> bool:
        assignments = []
        params: list[object] = []
        for attr, value in changes.items():
            column = _UPDATABLE.get(attr)
            if column is None:
                raise KeyError(f"Unsupported task field: {attr}")
            assignments.append(f"{column}=%s")
            params.append(_column_value(value))
        if not assignments:
            return False

        params.append(int(task_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE tasks SET {', '.join(assignments)} WHERE task_id=%s", tuple(params))
            return cur.rowcount > 0

    def delete(self, task_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (int(task_id),))
            return cur.rowcount > 0

    def count_in_progress(self, as_of: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM tasks
                WHERE status=%s
                   OR (status=%s AND start_date IS NOT NULL AND start_date <= %s)
                """,
                (TaskStatus.ONGOING.value, TaskStatus.TODO.value, as_of),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0
