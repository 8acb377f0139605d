from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles used for authorization."""

    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


ELEVATED_ROLES = frozenset({Role.MANAGER, Role.ADMIN})


class WorkLocation(str, Enum):
    HOME = "Home"
    OFFICE = "Office"


class ReviewStatus(str, Enum):
    """Approval state of a timecard or leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    OTHER = "other"


class TaskStatus(str, Enum):
    TODO = "todo"
    ONGOING = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AttendanceLabel(str, Enum):
    """Per-day attendance classification shown on calendars."""

    PRESENT_OFFICE = "present_office"
    PRESENT_HOME = "present_home"
    ABSENT = "absent"
    WEEKEND = "weekend"


class ClockState(str, Enum):
    CLOCKED_IN = "clocked_in"
    CLOCKED_OUT = "clocked_out"
