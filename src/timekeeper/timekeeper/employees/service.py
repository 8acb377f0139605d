from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from itsdangerous import BadSignature, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_enum, require_min_length, require_non_empty
from ..core.constants import RESET_TOKEN_MAX_AGE, UNASSIGNED_POD
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..core.identity import Identity
from ..pods.repository import PodRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# API field -> Employee attribute
FIELD_ATTRIBUTES = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "podName": "pod_name",
    "position": "position",
    "role": "role",
    "phone": "phone",
    "address": "address",
}

_SELF_SERVICE_FIELDS = frozenset({"firstName", "lastName", "email", "phone", "address"})

# Which profile fields each role may change through a general update.
EDITABLE_FIELDS: Mapping[Role, frozenset[str]] = {
    Role.ADMIN: frozenset(FIELD_ATTRIBUTES),
    Role.MANAGER: _SELF_SERVICE_FIELDS,
    Role.EMPLOYEE: _SELF_SERVICE_FIELDS,
}

MIN_PASSWORD_LENGTH = 6

_RESET_SALT = "timekeeper.password-reset"


def _require_pod(pods: PodRepository, pod_name) -> str:
    name = require_non_empty(pod_name, "POD name")
    if not pods.exists(name):
        raise ValidationError(f"Unknown POD: {name}")
    return name


def _open_account(
    employees: EmployeeRepository,
    pods: PodRepository,
    *,
    first_name,
    last_name,
    email,
    password,
    role,
    pod_name,
    position,
    employee_code,
) -> int:
    """Validate and insert a new employee row; shared by admin creation and signup."""

    first_name = require_non_empty(first_name, "First name")
    last_name = require_non_empty(last_name, "Last name")
    email = require_non_empty(email, "Email").lower()
    password = require_min_length(password or "", "Password", MIN_PASSWORD_LENGTH)
    role = require_enum(Role, role, "role")
    pod = _require_pod(pods, pod_name) if pod_name else None
    code = (employee_code or "").strip() or None

    if employees.get_by_email(email):
        raise ValidationError("Email is already in use")
    if code and employees.get_by_employee_code(code):
        raise ValidationError("Employee code is already in use")

    return employees.create(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=generate_password_hash(password),
        role=role,
        pod_name=pod,
        position=(position or "").strip(),
        employee_code=code,
    )


def _password_fingerprint(employee: Employee) -> str:
    # Changes with every new hash, so a used reset token stops verifying.
    return employee.password_hash[-16:]


class AuthService:
    """Use cases: login, self-registration and password reset."""

    def __init__(self, employees: EmployeeRepository, pods: PodRepository):
        self._employees = employees
        self._pods = pods

    def authenticate(self, email: str, password: str) -> Employee:
        employee = self._employees.get_by_email((email or "").strip().lower())
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("Employee %s logged in", employee.employee_id)
        return employee

    def register(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        pod_name: Optional[str] = None,
        position: str = "",
        employee_code: Optional[str] = None,
    ) -> Employee:
        """Self-service signup; new accounts always get the employee role."""

        employee_id = _open_account(
            self._employees,
            self._pods,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            role=Role.EMPLOYEE,
            pod_name=pod_name,
            position=position,
            employee_code=employee_code,
        )
        logger.info("Employee %s registered", employee_id)
        return self._employees.get_by_id(employee_id)

    def request_password_reset(self, email: str, *, secret_key: str) -> str:
        email = require_non_empty(email, "Email").lower()
        employee = self._employees.get_by_email(email)
        if not employee:
            raise NotFoundError("No account found with this email")

        token = URLSafeTimedSerializer(secret_key, salt=_RESET_SALT).dumps(
            {"id": employee.employee_id, "fp": _password_fingerprint(employee)}
        )
        # No mail transport: the token is only logged.
        logger.info("Password reset token for employee %s: %s", employee.employee_id, token)
        return token

    def reset_password(
        self,
        token: str,
        new_password: str,
        *,
        secret_key: str,
        max_age: int = RESET_TOKEN_MAX_AGE,
    ) -> None:
        token = require_non_empty(token, "Reset token")
        new_password = require_min_length(new_password or "", "New password", MIN_PASSWORD_LENGTH)

        try:
            payload = URLSafeTimedSerializer(secret_key, salt=_RESET_SALT).loads(token, max_age=max_age)
        except BadSignature:
            raise ValidationError("Invalid or expired reset token")

        employee = self._employees.get_by_id(int(payload.get("id", 0)))
        if not employee or payload.get("fp") != _password_fingerprint(employee):
            raise ValidationError("Invalid or expired reset token")

        self._employees.update_fields(employee.employee_id, {"password_hash": generate_password_hash(new_password)})
        logger.info("Password reset for employee %s", employee.employee_id)


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, pods: PodRepository):
        self._employees = employees
        self._pods = pods

    def _require(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _require_pod(self, pod_name) -> str:
        return _require_pod(self._pods, pod_name)

    def get(self, *, current: Identity, employee_id: int) -> Employee:
        if not (current.is_elevated or current.owns(employee_id)):
            raise AuthorizationError("You can only access your own profile")
        return self._require(employee_id)

    def list_all(self, *, current: Identity) -> Sequence[Employee]:
        if not current.is_admin:
            raise AuthorizationError("Access restricted to admin role")
        return self._employees.list_all()

    def create_account(
        self,
        *,
        current: Identity,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role=Role.EMPLOYEE,
        pod_name: Optional[str] = None,
        position: str = "",
        employee_code: Optional[str] = None,
    ) -> Employee:
        if not current.is_admin:
            raise AuthorizationError("Access restricted to admin role")

        employee_id = _open_account(
            self._employees,
            self._pods,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            role=role,
            pod_name=pod_name,
            position=position,
            employee_code=employee_code,
        )
        logger.info("Employee %s created by %s", employee_id, current.employee_id)
        return self._require(employee_id)

    def update_profile(self, *, current: Identity, employee_id: int, payload: Mapping[str, object]) -> Employee:
        """Apply only the fields the caller's role may edit; others are ignored."""

        if not (current.is_admin or current.owns(employee_id)):
            raise AuthorizationError("You can only access your own resources")
        self._require(employee_id)

        allowed = EDITABLE_FIELDS.get(current.role, frozenset())
        ignored = sorted(k for k in payload if k not in allowed)
        if ignored:
            logger.debug("Ignoring fields %s for %s update", ignored, current.role.value)

        changes: dict[str, object] = {}
        for key in allowed:
            if key in payload:
                changes[FIELD_ATTRIBUTES[key]] = self._clean_field(key, payload[key], employee_id=int(employee_id))

        if changes:
            self._employees.update_fields(int(employee_id), changes)
            logger.info("Employee %s updated by %s: %s", employee_id, current.employee_id, sorted(changes))
        return self._require(employee_id)

    def _clean_field(self, key: str, value, *, employee_id: int):
        if key in {"firstName", "lastName"}:
            return require_non_empty(value, key)
        if key == "email":
            email = require_non_empty(value, "Email").lower()
            existing = self._employees.get_by_email(email)
            if existing and existing.employee_id != employee_id:
                raise ValidationError("Email is already in use")
            return email
        if key == "role":
            return require_enum(Role, value, "role")
        if key == "podName":
            # null (or "") moves the employee back to Unassigned
            return None if value in (None, "") else self._require_pod(value)
        return None if value is None else str(value).strip()

    def change_role(self, *, current: Identity, employee_id: int, role) -> Employee:
        if not current.is_admin:
            raise AuthorizationError("Access restricted to admin role")
        new_role = require_enum(Role, role, "role")
        self._require(employee_id)
        self._employees.update_fields(int(employee_id), {"role": new_role})
        logger.info("Employee %s role set to %s by %s", employee_id, new_role.value, current.employee_id)
        return self._require(employee_id)

    def assign_pod(self, *, current: Identity, employee_id: int, pod_name) -> Employee:
        if not current.is_admin:
            raise AuthorizationError("Access restricted to admin role")
        pod = None if pod_name in (None, "") else self._require_pod(pod_name)
        self._require(employee_id)
        self._employees.update_fields(int(employee_id), {"pod_name": pod})
        logger.info("Employee %s moved to POD %s by %s", employee_id, pod or UNASSIGNED_POD, current.employee_id)
        return self._require(employee_id)

    def delete_employee(self, *, current: Identity, employee_id: int) -> None:
        if not current.is_admin:
            raise AuthorizationError("Access restricted to admin role")
        if current.owns(employee_id):
            raise ValidationError("You cannot delete your own account")
        self._require(employee_id)

        self._employees.delete_cascade(int(employee_id))
        logger.info("Employee %s deleted by %s", employee_id, current.employee_id)
