from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pod:
    """An organizational grouping of employees."""

    name: str
    employee_count: int = 0

    def to_dict(self) -> dict:
        return {"name": self.name, "employeeCount": self.employee_count}
