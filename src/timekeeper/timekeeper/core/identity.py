from __future__ import annotations

from dataclasses import dataclass

from .enums import ELEVATED_ROLES, Role


@dataclass(frozen=True)
class Identity:
    """Resolved caller of a request, as stored in the Flask session."""

    employee_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_elevated(self) -> bool:
        return self.role in ELEVATED_ROLES

    def owns(self, employee_id: int | None) -> bool:
        return employee_id is not None and int(employee_id) == self.employee_id
