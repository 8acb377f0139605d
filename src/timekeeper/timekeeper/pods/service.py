from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.constants import UNASSIGNED_POD
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, PodInUse, ValidationError
from ..core.identity import Identity
from ..employees.repository import EmployeeRepository
from .model import Pod
from .repository import PodRepository

logger = logging.getLogger(__name__)


class PodService:
    """The configured set of POD names, guarded by employee references."""

    def __init__(self, pods: PodRepository, employees: EmployeeRepository):
        self._pods = pods
        self._employees = employees

    def list_pods(self) -> Sequence[Pod]:
        counts = {name: n for name, n in self._employees.count_by_pod() if name}
        return [Pod(name=name, employee_count=counts.get(name, 0)) for name in self._pods.list_names()]

    def add_pod(self, *, current: Identity, name: str) -> Pod:
        if not current.is_admin:
            raise AuthorizationError("Access restricted to admin role")
        name = require_non_empty(name, "POD name")
        if name.lower() == UNASSIGNED_POD.lower():
            raise ValidationError(f"{UNASSIGNED_POD} is reserved")
        if not self._pods.add(name):
            raise ConflictError(f"POD {name} already exists")
        logger.info("POD %s added by %s", name, current.employee_id)
        return Pod(name=name)

    def remove_pod(self, *, current: Identity, name: str) -> None:
        if not current.is_admin:
            raise AuthorizationError("Access restricted to admin role")
        name = require_non_empty(name, "POD name")
        if not self._pods.exists(name):
            raise NotFoundError(f"POD {name} not found")

        in_use = self._employees.count_in_pod(name)
        if in_use:
            raise PodInUse(f"POD {name} still has {in_use} employee(s) assigned")

        self._pods.remove(name)
        logger.info("POD %s removed by %s", name, current.employee_id)
