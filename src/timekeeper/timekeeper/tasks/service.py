from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import require_date_range, require_enum, require_non_empty, require_positive_decimal
from ..core.enums import Role, TaskPriority, TaskStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.identity import Identity
from ..employees.repository import EmployeeRepository
from . import lifecycle
from .model import NewTask, Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

# API field -> Task attribute, for PUT /api/tasks/<id>
_EDITABLE = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "startDate": "start_date",
    "dueDate": "due_date",
    "estimatedHours": "estimated_hours",
    "assignedToId": "assigned_to_id",
}


def _as_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value))


class TaskService:
    """Task CRUD plus the date-driven status lifecycle."""

    def __init__(
        self,
        tasks: TaskRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._tasks = tasks
        self._employees = employees
        self._clock = clock

    def _require(self, task_id: int) -> Task:
        task = self._tasks.get_by_id(int(task_id))
        if not task:
            raise NotFoundError("Task not found")
        return task

    def _require_employee(self, employee_id) -> int:
        try:
            employee_id = int(employee_id)
        except (TypeError, ValueError):
            raise ValidationError("assignedToId must be an integer")
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Assignee not found")
        return employee_id

    def materialize(self, task: Task, *, today: date) -> Task:
        """Persist a due Todo -> Ongoing step; no-op when already applied."""

        current = lifecycle.materialize(task, today)
        if current.status != task.status:
            self._tasks.update_status(
                task_id=task.task_id,
                status=current.status,
                completed_at=task.completed_at,
                expected_status=task.status,
            )
            logger.info("Task %s started (start date %s)", task.task_id, task.start_date)
        return current

    def create(
        self,
        *,
        current: Identity,
        title: str,
        description: str,
        due_date,
        estimated_hours,
        priority=None,
        start_date=None,
        assigned_to_id=None,
        now: datetime | None = None,
    ) -> Task:
        now = now or self._clock()
        title = require_non_empty(title, "Title")
        description = require_non_empty(description, "Description")
        due = _as_date(due_date)
        if due is None:
            raise ValidationError("Due date is required")
        start = _as_date(start_date)
        hours = require_positive_decimal(estimated_hours, "Estimated hours")
        level = require_enum(TaskPriority, priority, "priority") if priority else TaskPriority.MEDIUM

        assignee = current.employee_id if assigned_to_id in (None, "") else self._require_employee(assigned_to_id)
        if current.role == Role.EMPLOYEE and assignee != current.employee_id:
            raise AuthorizationError("Employees can only create tasks for themselves")

        task_id = self._tasks.create(
            NewTask(
                title=title,
                description=description,
                assigned_to_id=assignee,
                assigned_by_id=current.employee_id,
                priority=level,
                start_date=start,
                due_date=due,
                created_date=now.date(),
                estimated_hours=hours,
            )
        )
        logger.info("Task %s created by %s for %s", task_id, current.employee_id, assignee)
        return self.materialize(self._require(task_id), today=now.date())

    def list_tasks(
        self,
        *,
        current: Identity,
        status=None,
        priority=None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: date | None = None,
    ) -> Sequence[Task]:
        """Admins see every task, everyone else the tasks assigned to them.

        The status filter applies to the effective status, so a Todo task
        whose start date has passed is listed as Ongoing.
        """

        today = today or self._clock().date()
        wanted = require_enum(TaskStatus, status, "status") if status else None
        level = require_enum(TaskPriority, priority, "priority") if priority else None
        if start_date is not None and end_date is not None:
            require_date_range(start_date, end_date)

        rows = self._tasks.list_tasks(
            assigned_to_id=None if current.is_admin else current.employee_id,
            priority=level,
            created_from=start_date,
            created_to=end_date,
        )
        tasks = [self.materialize(t, today=today) for t in rows]
        if wanted is not None:
            tasks = [t for t in tasks if t.status == wanted]
        return tasks

    def list_for_employee(self, *, current: Identity, employee_id: int, today: date | None = None) -> Sequence[Task]:
        if not (current.is_elevated or current.owns(employee_id)):
            raise AuthorizationError("You can only access your own tasks")
        today = today or self._clock().date()
        return [self.materialize(t, today=today) for t in self._tasks.list_tasks(assigned_to_id=int(employee_id))]

    def get(self, *, current: Identity, task_id: int, today: date | None = None) -> Task:
        task = self._require(task_id)
        if not (current.is_admin or current.owns(task.assigned_to_id)):
            raise AuthorizationError("You can only access your own tasks")
        return self.materialize(task, today=today or self._clock().date())

    def _require_editor(self, current: Identity, task: Task) -> None:
        if not (current.is_admin or current.owns(task.assigned_to_id) or current.owns(task.assigned_by_id)):
            raise AuthorizationError("You can only modify your own tasks")

    def update_status(self, *, current: Identity, task_id: int, status, now: datetime | None = None) -> Task:
        now = now or self._clock()
        new_status = require_enum(TaskStatus, status, "status")
        task = self._require(task_id)
        self._require_editor(current, task)

        task = self.materialize(task, today=now.date())
        updated = lifecycle.transition(task, new_status, now=now)
        if updated is task:
            return task

        self._tasks.update_status(task_id=task.task_id, status=updated.status, completed_at=updated.completed_at)
        logger.info(
            "Task %s moved %s -> %s by %s",
            task.task_id,
            task.status.value,
            updated.status.value,
            current.employee_id,
        )
        return updated

    def update(self, *, current: Identity, task_id: int, payload: Mapping[str, object], now: datetime | None = None) -> Task:
        now = now or self._clock()
        task = self._require(task_id)
        self._require_editor(current, task)

        changes: dict[str, object] = {}
        for key, attr in _EDITABLE.items():
            if key in payload:
                changes[attr] = self._clean_field(key, payload[key], current=current)

        due = changes.get("due_date", task.due_date)
        if due is None:
            raise ValidationError("Due date is required")

        if changes:
            self._tasks.update_fields(task.task_id, changes)

        refreshed = self._require(task.task_id)
        reconciled = lifecycle.reconcile_start_date(refreshed, now.date())
        if reconciled.status != refreshed.status:
            self._tasks.update_status(
                task_id=refreshed.task_id,
                status=reconciled.status,
                completed_at=refreshed.completed_at,
            )
            logger.info("Task %s status set to %s after start date change", task.task_id, reconciled.status.value)
        return reconciled

    def _clean_field(self, key: str, value, *, current: Identity):
        if key in {"title", "description"}:
            return require_non_empty(value, key)
        if key == "priority":
            return require_enum(TaskPriority, value, "priority")
        if key in {"startDate", "dueDate"}:
            return _as_date(value)
        if key == "estimatedHours":
            return require_positive_decimal(value, "Estimated hours")
        # assignedToId
        assignee = self._require_employee(value)
        if current.role == Role.EMPLOYEE and assignee != current.employee_id:
            raise AuthorizationError("Employees can only assign tasks to themselves")
        return assignee

    def delete(self, *, current: Identity, task_id: int) -> None:
        task = self._require(task_id)
        self._require_editor(current, task)
        self._tasks.delete(task.task_id)
        logger.info("Task %s deleted by %s", task.task_id, current.employee_id)
