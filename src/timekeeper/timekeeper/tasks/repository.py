from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import TaskPriority, TaskStatus
from .model import NewTask, Task


class TaskRepository(Protocol):
    def get_by_id(self, task_id: int) -> Optional[Task]:
        raise NotImplementedError

    def list_tasks(
        self,
        *,
        assigned_to_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        priority: Optional[TaskPriority] = None,
        created_from: Optional[date] = None,
        created_to: Optional[date] = None,
    ) -> Sequence[Task]:
        """Ordered by due date, newest created first within a day."""

        raise NotImplementedError

    def create(self, task: NewTask) -> int:
        raise NotImplementedError

    def update_status(
        self,
        *,
        task_id: int,
        status: TaskStatus,
        completed_at: Optional[datetime],
        expected_status: Optional[TaskStatus] = None,
    ) -> bool:
        """Write status and completion stamp together.

        With ``expected_status`` the write only happens while the stored
        status still matches (used by the lazy Todo -> Ongoing step).
        """

        raise NotImplementedError

    def update_fields(self, task_id: int, changes: Mapping[str, object]) -> bool:
        raise NotImplementedError

    def delete(self, task_id: int) -> bool:
        raise NotImplementedError

    def count_in_progress(self, as_of: date) -> int:
        """Tasks whose effective status on ``as_of`` is Ongoing.

        Counts stored Ongoing rows plus Todo rows whose start date has been
        reached, whether or not they were materialized yet.
        """

        raise NotImplementedError
