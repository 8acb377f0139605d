from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data object, no DB access code. ``password_hash`` never
    leaves the service layer (see ``to_dict``).
    """

    employee_id: int
    first_name: str
    last_name: str
    email: str
    password_hash: str
    role: Role
    pod_name: Optional[str]
    position: str
    phone: Optional[str] = None
    address: Optional[str] = None
    employee_code: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "employeeCode": self.employee_code,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "role": self.role.value,
            "podName": self.pod_name,
            "position": self.position,
            "phone": self.phone,
            "address": self.address,
            "createdAt": isoformat_or_none(self.created_at),
        }
