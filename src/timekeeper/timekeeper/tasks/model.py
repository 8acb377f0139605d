from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import TaskPriority, TaskStatus
from .lifecycle import is_delayed


@dataclass(frozen=True)
class Task:
    task_id: int
    title: str
    description: str
    assigned_to_id: int
    assigned_by_id: Optional[int]
    status: TaskStatus
    priority: TaskPriority
    start_date: Optional[date]
    due_date: date
    created_date: date
    estimated_hours: Optional[Decimal] = None
    completed_at: Optional[datetime] = None

    def to_dict(self, *, today: date | None = None) -> dict:
        data = {
            "id": self.task_id,
            "title": self.title,
            "description": self.description,
            "assignedToId": self.assigned_to_id,
            "assignedById": self.assigned_by_id,
            "status": self.status.value,
            "priority": self.priority.value,
            "startDate": isoformat_or_none(self.start_date),
            "dueDate": self.due_date.isoformat(),
            "createdDate": self.created_date.isoformat(),
            "estimatedHours": float(self.estimated_hours) if self.estimated_hours is not None else None,
            "completedAt": isoformat_or_none(self.completed_at),
        }
        if today is not None:
            data["delayed"] = is_delayed(self, today)
        return data


@dataclass(frozen=True)
class NewTask:
    title: str
    description: str
    assigned_to_id: int
    assigned_by_id: int
    priority: TaskPriority
    start_date: Optional[date]
    due_date: date
    created_date: date
    estimated_hours: Decimal
