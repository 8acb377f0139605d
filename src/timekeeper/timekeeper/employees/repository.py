from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(
        self,
        *,
        role: Optional[Role] = None,
        pod_name: Optional[str] = None,
        unassigned: bool = False,
    ) -> Sequence[Employee]:
        """With ``unassigned`` only employees without a POD are returned."""

        raise NotImplementedError

    def get_by_employee_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_fields(self, employee_id: int, changes: Mapping[str, object]) -> bool:
        """Apply column -> value changes; keys are Employee attribute names."""

        raise NotImplementedError

    def count(self, *, role: Optional[Role] = None) -> int:
        raise NotImplementedError

    def count_by_pod(self, *, role: Optional[Role] = None) -> Sequence[tuple[Optional[str], int]]:
        raise NotImplementedError

    def count_in_pod(self, pod_name: str) -> int:
        raise NotImplementedError

    def delete_cascade(self, employee_id: int) -> bool:
        """Delete the employee with owned timecards, leave and assigned tasks.

        Leave requests it approved and tasks it assigned keep existing with
        the back-reference set to NULL.
        """

        raise NotImplementedError
