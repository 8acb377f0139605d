from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeper.timekeeper.core.enums import ReviewStatus, Role
from src.timekeeper.timekeeper.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.timekeeper.timekeeper.employees.service import EDITABLE_FIELDS, AuthService, EmployeeService


@pytest.fixture
def svc(repos):
    return EmployeeService(repos.employees, repos.pods)


def test_authenticate_with_correct_password(repos, staff):
    employee = AuthService(repos.employees, repos.pods).authenticate("  Alice@Example.com ", "secret123")

    assert employee.employee_id == staff.alice.employee_id


@pytest.mark.parametrize("email, password", [("alice@example.com", "wrong"), ("ghost@example.com", "secret123")])
def test_authenticate_rejects_bad_credentials(repos, staff, email, password):
    with pytest.raises(AuthenticationError):
        AuthService(repos.employees, repos.pods).authenticate(email, password)


def test_authenticate_rejects_inactive_and_placeholder_hash(repos, staff):
    repos.employees.update_fields(staff.alice.employee_id, {"is_active": False})
    repos.employees.update_fields(staff.bob.employee_id, {"password_hash": "CHANGE_ME"})
    auth = AuthService(repos.employees, repos.pods)

    with pytest.raises(AuthenticationError):
        auth.authenticate("alice@example.com", "secret123")
    with pytest.raises(AuthenticationError):
        auth.authenticate("bob@example.com", "CHANGE_ME")


def test_employee_update_ignores_fields_outside_whitelist(svc, staff):
    updated = svc.update_profile(
        current=staff.alice,
        employee_id=staff.alice.employee_id,
        payload={"phone": "555-0100", "role": "admin", "podName": "Payments", "position": "CTO"},
    )

    assert updated.phone == "555-0100"
    assert updated.role == Role.EMPLOYEE
    assert updated.pod_name == "Platform"
    assert updated.position == "Engineer"


def test_admin_may_change_role_pod_and_position(svc, staff):
    updated = svc.update_profile(
        current=staff.admin,
        employee_id=staff.alice.employee_id,
        payload={"role": "manager", "podName": "Payments", "position": "Lead"},
    )

    assert (updated.role, updated.pod_name, updated.position) == (Role.MANAGER, "Payments", "Lead")


def test_whitelist_table():
    assert "role" in EDITABLE_FIELDS[Role.ADMIN]
    assert "role" not in EDITABLE_FIELDS[Role.MANAGER]
    assert EDITABLE_FIELDS[Role.EMPLOYEE] == {"firstName", "lastName", "email", "phone", "address"}


def test_update_profile_of_someone_else_requires_admin(svc, staff):
    with pytest.raises(AuthorizationError):
        svc.update_profile(current=staff.manager, employee_id=staff.alice.employee_id, payload={"phone": "1"})


def test_update_email_must_stay_unique(svc, staff):
    with pytest.raises(ValidationError):
        svc.update_profile(current=staff.alice, employee_id=staff.alice.employee_id, payload={"email": "bob@example.com"})

    same = svc.update_profile(
        current=staff.alice,
        employee_id=staff.alice.employee_id,
        payload={"email": "ALICE@example.com"},
    )
    assert same.email == "alice@example.com"


def test_create_account(svc, repos, staff):
    created = svc.create_account(
        current=staff.admin,
        first_name="Kim",
        last_name="New",
        email="Kim@Example.com",
        password="hunter22",
        pod_name="Payments",
    )

    assert created.email == "kim@example.com"
    assert created.role == Role.EMPLOYEE
    assert created.password_hash != "hunter22"
    assert AuthService(repos.employees, repos.pods).authenticate("kim@example.com", "hunter22").employee_id == created.employee_id


@pytest.mark.parametrize(
    "overrides, error",
    [
        ({"password": "123"}, ValidationError),
        ({"email": "alice@example.com"}, ValidationError),
        ({"pod_name": "Nowhere"}, ValidationError),
        ({"role": "owner"}, ValidationError),
        ({"first_name": ""}, ValidationError),
    ],
)
def test_create_account_validation(svc, staff, overrides, error):
    fields = dict(first_name="Kim", last_name="New", email="kim@example.com", password="hunter22")
    fields.update(overrides)

    with pytest.raises(error):
        svc.create_account(current=staff.admin, **fields)


def test_only_admin_creates_accounts(svc, staff):
    with pytest.raises(AuthorizationError):
        svc.create_account(current=staff.manager, first_name="K", last_name="N", email="k@x.io", password="hunter22")


def test_assign_pod_requires_existing_pod(svc, staff):
    with pytest.raises(ValidationError):
        svc.assign_pod(current=staff.admin, employee_id=staff.alice.employee_id, pod_name="Nowhere")

    moved = svc.assign_pod(current=staff.admin, employee_id=staff.alice.employee_id, pod_name="Payments")
    assert moved.pod_name == "Payments"


def test_change_role(svc, staff):
    assert svc.change_role(current=staff.admin, employee_id=staff.bob.employee_id, role="manager").role == Role.MANAGER
    with pytest.raises(AuthorizationError):
        svc.change_role(current=staff.manager, employee_id=staff.bob.employee_id, role="admin")


def test_delete_cascades_and_nulls_back_references(svc, repos, staff):
    alice, manager = staff.alice.employee_id, staff.manager.employee_id
    repos.timecards.add(employee_id=alice, clock_in_at=datetime(2025, 1, 15, 9, 0))
    repos.leave.add(employee_id=alice, start_date=date(2025, 2, 1), end_date=date(2025, 2, 2))
    approved_by_manager = repos.leave.add(employee_id=staff.bob.employee_id, start_date=date(2025, 3, 1), end_date=date(2025, 3, 2))
    repos.leave.decide(request_id=approved_by_manager.request_id, status=ReviewStatus.APPROVED, approver_id=manager)
    repos.tasks.add(assigned_to_id=alice, due_date=date(2025, 1, 31))
    assigned_by_manager = repos.tasks.add(assigned_to_id=staff.bob.employee_id, assigned_by_id=manager, due_date=date(2025, 1, 31))

    svc.delete_employee(current=staff.admin, employee_id=alice)
    svc.delete_employee(current=staff.admin, employee_id=manager)

    assert repos.employees.get_by_id(alice) is None
    assert all(r.employee_id != alice for r in repos.timecards.records.values())
    assert all(r.employee_id != alice for r in repos.leave.requests.values())
    assert all(t.assigned_to_id != alice for t in repos.tasks.tasks.values())
    assert repos.leave.get_by_id(approved_by_manager.request_id).approver_id is None
    assert repos.tasks.get_by_id(assigned_by_manager.task_id).assigned_by_id is None


def test_admin_cannot_delete_self_and_missing_is_404(svc, staff):
    with pytest.raises(ValidationError):
        svc.delete_employee(current=staff.admin, employee_id=staff.admin.employee_id)
    with pytest.raises(NotFoundError):
        svc.delete_employee(current=staff.admin, employee_id=404)


def test_admin_can_move_employee_back_to_unassigned(svc, staff):
    cleared = svc.update_profile(current=staff.admin, employee_id=staff.alice.employee_id, payload={"podName": None})
    assert cleared.pod_name is None

    blank = svc.update_profile(current=staff.admin, employee_id=staff.bob.employee_id, payload={"podName": ""})
    assert blank.pod_name is None


@pytest.fixture
def auth(repos):
    return AuthService(repos.employees, repos.pods)


def test_register_always_creates_an_employee(auth, staff):
    created = auth.register(
        first_name="Kim",
        last_name="New",
        email="Kim@Example.com",
        password="hunter22",
        pod_name="Payments",
        employee_code="E-100",
    )

    assert created.role == Role.EMPLOYEE
    assert (created.email, created.pod_name, created.employee_code) == ("kim@example.com", "Payments", "E-100")
    assert auth.authenticate("kim@example.com", "hunter22").employee_id == created.employee_id


def test_register_rejects_duplicates(auth, staff):
    auth.register(first_name="Kim", last_name="New", email="kim@example.com", password="hunter22", employee_code="E-100")

    with pytest.raises(ValidationError, match="Email"):
        auth.register(first_name="Kim", last_name="Two", email="alice@example.com", password="hunter22")
    with pytest.raises(ValidationError, match="Employee code"):
        auth.register(first_name="Lee", last_name="Two", email="lee@example.com", password="hunter22", employee_code="E-100")


def test_password_reset_flow(auth, staff):
    token = auth.request_password_reset("ALICE@example.com", secret_key="s3cret")

    auth.reset_password(token, "brand-new", secret_key="s3cret")

    assert auth.authenticate("alice@example.com", "brand-new").employee_id == staff.alice.employee_id
    with pytest.raises(AuthenticationError):
        auth.authenticate("alice@example.com", "secret123")
    # the hash changed, so the same token no longer verifies
    with pytest.raises(ValidationError, match="Invalid or expired"):
        auth.reset_password(token, "another1", secret_key="s3cret")


@pytest.mark.parametrize(
    "mangle",
    [lambda t: t + "x", lambda t: "garbage"],
)
def test_reset_rejects_tampered_tokens(auth, staff, mangle):
    token = auth.request_password_reset("alice@example.com", secret_key="s3cret")

    with pytest.raises(ValidationError):
        auth.reset_password(mangle(token), "brand-new", secret_key="s3cret")


def test_reset_token_is_bound_to_the_secret_key(auth, staff):
    token = auth.request_password_reset("alice@example.com", secret_key="s3cret")

    with pytest.raises(ValidationError):
        auth.reset_password(token, "brand-new", secret_key="other")


def test_reset_checks_password_length_and_unknown_email(auth, staff):
    token = auth.request_password_reset("alice@example.com", secret_key="s3cret")

    with pytest.raises(ValidationError):
        auth.reset_password(token, "123", secret_key="s3cret")
    with pytest.raises(NotFoundError):
        auth.request_password_reset("ghost@example.com", secret_key="s3cret")


def test_assign_pod_with_null_unassigns(svc, staff):
    moved = svc.assign_pod(current=staff.admin, employee_id=staff.alice.employee_id, pod_name=None)

    assert moved.pod_name is None
