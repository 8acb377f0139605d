from __future__ import annotations

import pytest

from src.timekeeper.timekeeper.core.exceptions import AuthorizationError, ConflictError, NotFoundError, PodInUse, ValidationError
from src.timekeeper.timekeeper.pods.service import PodService


@pytest.fixture
def svc(repos):
    return PodService(repos.pods, repos.employees)


def test_list_pods_with_member_counts(svc, staff):
    pods = {p.name: p.employee_count for p in svc.list_pods()}

    assert pods == {"Payments": 0, "Platform": 3}


def test_add_pod(svc, repos, staff):
    svc.add_pod(current=staff.admin, name="  Mobile ")

    assert repos.pods.exists("Mobile")
    with pytest.raises(ConflictError):
        svc.add_pod(current=staff.admin, name="Mobile")
    with pytest.raises(ValidationError):
        svc.add_pod(current=staff.admin, name="unassigned")
    with pytest.raises(AuthorizationError):
        svc.add_pod(current=staff.manager, name="Data")


def test_remove_pod_blocked_while_referenced(svc, repos, staff):
    with pytest.raises(PodInUse):
        svc.remove_pod(current=staff.admin, name="Platform")

    svc.remove_pod(current=staff.admin, name="Payments")
    assert not repos.pods.exists("Payments")

    with pytest.raises(NotFoundError):
        svc.remove_pod(current=staff.admin, name="Payments")
