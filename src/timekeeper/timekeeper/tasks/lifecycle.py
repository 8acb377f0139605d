"""Task state machine.

    Todo --(start_date <= today)--> Ongoing --(complete)--> Completed

Blocked is a manual side state reachable from Todo and Ongoing. The
Todo -> Ongoing step has no scheduler behind it: it is derived on read and
persisted by ``TaskService`` only when stored and derived state differ.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import TYPE_CHECKING, Mapping

from ..core.enums import TaskStatus
from ..core.exceptions import ValidationError

if TYPE_CHECKING:
    from .model import Task

ALLOWED_TRANSITIONS: Mapping[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.TODO: frozenset({TaskStatus.ONGOING, TaskStatus.COMPLETED, TaskStatus.BLOCKED}),
    TaskStatus.ONGOING: frozenset({TaskStatus.TODO, TaskStatus.COMPLETED, TaskStatus.BLOCKED}),
    TaskStatus.BLOCKED: frozenset({TaskStatus.TODO, TaskStatus.ONGOING, TaskStatus.COMPLETED}),
    TaskStatus.COMPLETED: frozenset({TaskStatus.TODO, TaskStatus.ONGOING}),
}


def effective_status(task: Task, today: date) -> TaskStatus:
    if task.status == TaskStatus.TODO and task.start_date is not None and task.start_date <= today:
        return TaskStatus.ONGOING
    return task.status


def is_delayed(task: Task, today: date) -> bool:
    return task.due_date < today and task.status != TaskStatus.COMPLETED


def materialize(task: Task, today: date) -> Task:
    """Return the task with its date-driven status applied (idempotent)."""
    status = effective_status(task, today)
    if status == task.status:
        return task
    return replace(task, status=status)


def transition(task: Task, new_status: TaskStatus, *, now: datetime) -> Task:
    """Apply an explicit status change.

    Entering Completed stamps ``completed_at``; leaving it clears the stamp.
    Re-applying the current status is a no-op.
    """
    if new_status == task.status:
        return task
    if new_status not in ALLOWED_TRANSITIONS[task.status]:
        raise ValidationError(f"Cannot move a task from {task.status.value} to {new_status.value}")

    completed_at = task.completed_at
    if new_status == TaskStatus.COMPLETED:
        completed_at = now
    elif task.status == TaskStatus.COMPLETED:
        completed_at = None
    return replace(task, status=new_status, completed_at=completed_at)


def reconcile_start_date(task: Task, today: date) -> Task:
    """After a start-date edit: a future start puts an Ongoing task back to Todo."""
    if task.status == TaskStatus.ONGOING and task.start_date is not None and task.start_date > today:
        return replace(task, status=TaskStatus.TODO)
    return materialize(task, today)
