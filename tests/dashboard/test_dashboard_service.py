from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.timekeeper.timekeeper.attendance.classifier import AttendanceClassifier
from src.timekeeper.timekeeper.core.enums import AttendanceLabel, ClockState, ReviewStatus, Role, TaskStatus, WorkLocation
from src.timekeeper.timekeeper.core.exceptions import InvalidRange, NotFoundError
from src.timekeeper.timekeeper.dashboard.service import DashboardService

MONDAY = date(2025, 1, 13)
FRIDAY = date(2025, 1, 17)


@pytest.fixture
def svc(repos, clock):
    return DashboardService(
        employees=repos.employees,
        timecards=repos.timecards,
        leave=repos.leave,
        tasks=repos.tasks,
        pods=repos.pods,
        clock=clock,
    )


def _at(day: date, hour: int) -> datetime:
    return datetime(day.year, day.month, day.day, hour, 0)


def test_pod_calendar_three_people_five_weekdays(svc, repos, hire):
    repos.pods.add("Payments")
    people = [hire(name, "Pay", pod="Payments") for name in ("Cara", "Dan", "Eve")]

    # each person misses a different weekday
    for offset, person in enumerate(people):
        for d in range(5):
            if d == offset:
                continue
            day = MONDAY + timedelta(days=d)
            location = WorkLocation.HOME if d % 2 else WorkLocation.OFFICE
            repos.timecards.add(
                employee_id=person.employee_id,
                clock_in_at=_at(day, 9),
                clock_out_at=_at(day, 17),
                location=location,
            )

    calendar = svc.pod_attendance_calendar("Payments", MONDAY, FRIDAY)

    assert calendar.cell_count == 15
    assert sum(len(e.days) for e in calendar.employees) == 15

    classifier = AttendanceClassifier()
    for row in calendar.employees:
        own = repos.timecards.list_in_range(start_date=MONDAY, end_date=FRIDAY, employee_ids=[row.employee_id])
        assert list(row.days) == list(classifier.classify(MONDAY, FRIDAY, own))
        assert sum(1 for d in row.days if d.label == AttendanceLabel.ABSENT) == 1

    monday = calendar.by_day[MONDAY]
    assert monday["absent"] == [people[0].employee_id]
    assert sorted(monday["present"]) == sorted(p.employee_id for p in people[1:])
    assert monday["home"] == []
    assert sorted(calendar.by_day[date(2025, 1, 14)]["home"]) == sorted(
        p.employee_id for p in (people[0], people[2])
    )


def test_pod_calendar_weekend_has_no_bucket(svc, repos, hire):
    repos.pods.add("Mobile")
    hire("Finn", "Mob", pod="Mobile")

    calendar = svc.pod_attendance_calendar("Mobile", date(2025, 1, 17), date(2025, 1, 19))

    assert list(calendar.by_day) == [date(2025, 1, 17)]
    assert calendar.cell_count == 1
    assert len(calendar.employees[0].days) == 3


def test_pod_calendar_validates_input(svc, staff):
    with pytest.raises(InvalidRange):
        svc.pod_attendance_calendar("Platform", FRIDAY, MONDAY)
    with pytest.raises(NotFoundError):
        svc.pod_attendance_calendar("Nowhere", MONDAY, FRIDAY)


def test_dashboard_stats_counts(svc, repos, staff):
    today = date(2025, 1, 15)
    repos.timecards.add(employee_id=staff.alice.employee_id, clock_in_at=_at(today, 9))
    repos.timecards.add(employee_id=staff.bob.employee_id, clock_in_at=_at(today, 8), clock_out_at=_at(today, 12))
    repos.timecards.add(employee_id=staff.manager.employee_id, clock_in_at=_at(today - timedelta(days=1), 9))
    repos.leave.add(employee_id=staff.alice.employee_id, start_date=today, end_date=today)
    repos.leave.add(
        employee_id=staff.bob.employee_id,
        start_date=today,
        end_date=today,
        status=ReviewStatus.APPROVED,
    )
    repos.tasks.add(assigned_to_id=staff.alice.employee_id, due_date=today, status=TaskStatus.ONGOING)
    repos.tasks.add(assigned_to_id=staff.bob.employee_id, due_date=today, status=TaskStatus.BLOCKED)

    stats = svc.dashboard_stats(today).to_dict()

    assert stats == {
        "totalEmployees": 2,
        "clockedInCount": 1,
        "pendingLeaveCount": 1,
        "tasksInProgressCount": 1,
    }


def test_pod_stats_sorted_with_unassigned_bucket(svc, repos, staff, hire):
    hire("Gus", "Pay", pod="Payments")
    hire("Hal", "None")
    hire("Ivy", "None")
    hire("Jo", "None")
    hire("Root", "Admin", role=Role.ADMIN)

    stats = [s.to_dict() for s in svc.pod_stats()]

    assert stats == [
        {"podName": "Unassigned", "employeeCount": 3},
        {"podName": "Platform", "employeeCount": 2},
        {"podName": "Payments", "employeeCount": 1},
    ]


def test_employee_statuses_location_only_while_clocked_in(svc, repos, staff):
    today = date(2025, 1, 15)
    repos.timecards.add(employee_id=staff.alice.employee_id, clock_in_at=_at(today, 9), location=WorkLocation.HOME)
    repos.timecards.add(
        employee_id=staff.bob.employee_id,
        clock_in_at=_at(today, 8),
        clock_out_at=_at(today, 12),
        location=WorkLocation.HOME,
    )

    statuses = {s.employee_id: s for s in svc.employee_statuses(today)}

    alice = statuses[staff.alice.employee_id]
    bob = statuses[staff.bob.employee_id]
    assert alice.status == ClockState.CLOCKED_IN
    assert alice.current_location == WorkLocation.HOME
    assert bob.status == ClockState.CLOCKED_OUT
    assert bob.current_location is None
    assert bob.last_clock_out == _at(today, 12)
    assert staff.manager.employee_id not in statuses


def test_employee_statuses_without_any_record(svc, staff):
    statuses = svc.employee_statuses(date(2025, 1, 15))

    assert {s.status for s in statuses} == {ClockState.CLOCKED_OUT}
    assert all(s.last_clock_in is None for s in statuses)


def test_unassigned_bucket_has_a_calendar(svc, repos, staff, hire):
    hal = hire("Hal", "None")
    repos.timecards.add(
        employee_id=hal.employee_id,
        clock_in_at=_at(MONDAY, 9),
        clock_out_at=_at(MONDAY, 17),
        location=WorkLocation.HOME,
    )

    assert "Unassigned" in [s.pod_name for s in svc.pod_stats()]
    calendar = svc.pod_attendance_calendar("Unassigned", MONDAY, FRIDAY)

    # everyone without a POD: Hal and the admin
    assert sorted(e.employee_id for e in calendar.employees) == sorted([staff.admin.employee_id, hal.employee_id])
    assert staff.alice.employee_id not in [e.employee_id for e in calendar.employees]
    assert calendar.by_day[MONDAY]["home"] == [hal.employee_id]


def test_in_progress_count_does_not_depend_on_earlier_reads(svc, repos, staff, container):
    today = date(2025, 1, 15)
    repos.tasks.add(assigned_to_id=staff.alice.employee_id, due_date=today, start_date=today - timedelta(days=1))
    repos.tasks.add(assigned_to_id=staff.bob.employee_id, due_date=today, start_date=today + timedelta(days=1))

    before = svc.dashboard_stats(today).tasks_in_progress_count
    container.task_service.list_tasks(current=staff.admin, today=today)
    after = svc.dashboard_stats(today).tasks_in_progress_count

    assert before == after == 1
