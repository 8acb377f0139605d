from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from src.timekeeper.timekeeper.container import wire_container
from src.timekeeper.timekeeper.core.enums import LeaveType, ReviewStatus, Role, TaskPriority, TaskStatus
from src.timekeeper.timekeeper.core.exceptions import AlreadyClockedIn, OverlappingLeave, PodInUse
from src.timekeeper.timekeeper.core.identity import Identity
from src.timekeeper.timekeeper.employees.model import Employee
from src.timekeeper.timekeeper.leave.model import LeaveRequest, ranges_overlap
from src.timekeeper.timekeeper.tasks.lifecycle import effective_status
from src.timekeeper.timekeeper.tasks.model import Task
from src.timekeeper.timekeeper.timecards.model import TimeRecord, compute_total_hours

# Wednesday
TODAY = date(2025, 1, 15)

# Cheap hash so the suite stays fast.
HASH_METHOD = "pbkdf2:sha256:1000"


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeTimecardRepo:
    def __init__(self):
        self._next_id = 1
        self.records: dict[int, TimeRecord] = {}

    def add(self, *, employee_id, clock_in_at, clock_out_at=None, location=None, review_status=ReviewStatus.PENDING):
        record = TimeRecord(
            record_id=self._next_id,
            employee_id=employee_id,
            work_date=clock_in_at.date(),
            clock_in_at=clock_in_at,
            clock_out_at=clock_out_at,
            location=location,
            total_hours=compute_total_hours(clock_in_at, clock_out_at),
            review_status=review_status,
        )
        self.records[record.record_id] = record
        self._next_id += 1
        return record

    def get_by_id(self, record_id):
        return self.records.get(int(record_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        for r in self.records.values():
            if r.employee_id == employee_id and r.work_date == work_date:
                return r
        return None

    def create_clock_in(self, *, employee_id, work_date, clock_in_at, location):
        if self.get_for_employee_and_date(employee_id, work_date):
            raise AlreadyClockedIn("Already clocked in today")
        return self.add(employee_id=employee_id, clock_in_at=clock_in_at, location=location)

    def close_session(self, *, record_id, clock_out_at, total_hours):
        r = self.records.get(record_id)
        if not r or r.clock_out_at is not None:
            return False
        self.records[record_id] = replace(r, clock_out_at=clock_out_at, total_hours=total_hours)
        return True

    def set_review_status(self, *, record_id, status, notes=None):
        r = self.records.get(record_id)
        if not r:
            return False
        self.records[record_id] = replace(r, review_status=status, notes=notes or r.notes)
        return True

    def list_in_range(self, *, start_date, end_date, employee_ids=None):
        rows = [
            r
            for r in self.records.values()
            if start_date <= r.work_date <= end_date and (employee_ids is None or r.employee_id in employee_ids)
        ]
        return sorted(rows, key=lambda r: (r.work_date, r.record_id), reverse=True)

    def count_open_for_date(self, work_date):
        return sum(1 for r in self.records.values() if r.work_date == work_date and r.clock_out_at is None)


class FakeLeaveRepo:
    def __init__(self):
        self._next_id = 1
        self.requests: dict[int, LeaveRequest] = {}

    def add(self, *, employee_id, start_date, end_date, status=ReviewStatus.PENDING, leave_type="vacation"):
        request = LeaveRequest(
            request_id=self._next_id,
            employee_id=employee_id,
            leave_type=LeaveType(leave_type),
            start_date=start_date,
            end_date=end_date,
            reason="seeded",
            status=status,
        )
        self.requests[request.request_id] = request
        self._next_id += 1
        return request

    def get_by_id(self, request_id):
        return self.requests.get(int(request_id))

    def list_requests(self, *, status=None, employee_id=None, start_date=None, end_date=None):
        rows = [
            r
            for r in self.requests.values()
            if (status is None or r.status == status)
            and (employee_id is None or r.employee_id == employee_id)
            and (start_date is None or end_date is None or start_date <= r.start_date <= end_date)
        ]
        return sorted(rows, key=lambda r: (r.start_date, r.request_id), reverse=True)

    def list_approved_overlapping(self, *, employee_id, start_date, end_date):
        return [
            r
            for r in self.requests.values()
            if r.employee_id == employee_id
            and r.status == ReviewStatus.APPROVED
            and ranges_overlap(start_date, end_date, r.start_date, r.end_date)
        ]

    def create(self, request):
        if self.list_approved_overlapping(
            employee_id=request.employee_id, start_date=request.start_date, end_date=request.end_date
        ):
            raise OverlappingLeave("You already have approved leave during this period")
        created = LeaveRequest(
            request_id=self._next_id,
            employee_id=request.employee_id,
            leave_type=request.leave_type,
            start_date=request.start_date,
            end_date=request.end_date,
            reason=request.reason,
            status=ReviewStatus.PENDING,
            backup_delegate=request.backup_delegate,
            day_count=request.day_count,
        )
        self.requests[created.request_id] = created
        self._next_id += 1
        return created

    def decide(self, *, request_id, status, approver_id, reviewer_notes=None):
        r = self.requests.get(int(request_id))
        if not r or r.status != ReviewStatus.PENDING:
            return False
        self.requests[r.request_id] = replace(r, status=status, approver_id=approver_id, reviewer_notes=reviewer_notes)
        return True

    def delete_pending(self, request_id):
        r = self.requests.get(int(request_id))
        if not r or r.status != ReviewStatus.PENDING:
            return False
        del self.requests[r.request_id]
        return True

    def count_by_status(self, status):
        return sum(1 for r in self.requests.values() if r.status == status)


class FakeTaskRepo:
    def __init__(self):
        self._next_id = 1
        self.tasks: dict[int, Task] = {}
        self.status_writes: list[tuple[int, TaskStatus]] = []

    def add(self, *, assigned_to_id, due_date, start_date=None, status=TaskStatus.TODO, assigned_by_id=None,
            created_date=TODAY, completed_at=None, title="Task"):
        task = Task(
            task_id=self._next_id,
            title=title,
            description="seeded",
            assigned_to_id=assigned_to_id,
            assigned_by_id=assigned_by_id,
            status=status,
            priority=TaskPriority.MEDIUM,
            start_date=start_date,
            due_date=due_date,
            created_date=created_date,
            estimated_hours=Decimal("2"),
            completed_at=completed_at,
        )
        self.tasks[task.task_id] = task
        self._next_id += 1
        return task

    def get_by_id(self, task_id):
        return self.tasks.get(int(task_id))

    def list_tasks(self, *, assigned_to_id=None, status=None, priority=None, created_from=None, created_to=None):
        rows = [
            t
            for t in self.tasks.values()
            if (assigned_to_id is None or t.assigned_to_id == assigned_to_id)
            and (status is None or t.status == status)
            and (priority is None or t.priority == priority)
            and (created_from is None or t.created_date >= created_from)
            and (created_to is None or t.created_date <= created_to)
        ]
        return sorted(rows, key=lambda t: (t.due_date, t.task_id))

    def create(self, task):
        created = Task(
            task_id=self._next_id,
            title=task.title,
            description=task.description,
            assigned_to_id=task.assigned_to_id,
            assigned_by_id=task.assigned_by_id,
            status=TaskStatus.TODO,
            priority=task.priority,
            start_date=task.start_date,
            due_date=task.due_date,
            created_date=task.created_date,
            estimated_hours=task.estimated_hours,
        )
        self.tasks[created.task_id] = created
        self._next_id += 1
        return created.task_id

    def update_status(self, *, task_id, status, completed_at, expected_status=None):
        t = self.tasks.get(int(task_id))
        if not t or (expected_status is not None and t.status != expected_status):
            return False
        self.tasks[t.task_id] = replace(t, status=status, completed_at=completed_at)
        self.status_writes.append((t.task_id, status))
        return True

    def update_fields(self, task_id, changes):
        t = self.tasks.get(int(task_id))
        if not t:
            return False
        self.tasks[t.task_id] = replace(t, **changes)
        return True

    def delete(self, task_id):
        return self.tasks.pop(int(task_id), None) is not None

    def count_in_progress(self, as_of):
        return sum(1 for t in self.tasks.values() if effective_status(t, as_of) == TaskStatus.ONGOING)


class FakeEmployeeRepo:
    def __init__(self, *, timecards: FakeTimecardRepo, leave: FakeLeaveRepo, tasks: FakeTaskRepo):
        self._next_id = 1
        self.employees: dict[int, Employee] = {}
        self._timecards = timecards
        self._leave = leave
        self._tasks = tasks

    def get_by_id(self, employee_id):
        return self.employees.get(int(employee_id))

    def get_by_email(self, email):
        for e in self.employees.values():
            if e.email == email:
                return e
        return None

    def get_by_employee_code(self, employee_code):
        for e in self.employees.values():
            if e.employee_code == employee_code:
                return e
        return None

    def list_all(self, *, role=None, pod_name=None, unassigned=False):
        rows = [
            e
            for e in self.employees.values()
            if (role is None or e.role == role)
            and (e.pod_name is None if unassigned else (pod_name is None or e.pod_name == pod_name))
        ]
        return sorted(rows, key=lambda e: (e.last_name, e.first_name, e.employee_id))

    def create(self, *, first_name, last_name, email, password_hash, role, pod_name, position, employee_code=None):
        employee = Employee(
            employee_id=self._next_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            role=role,
            pod_name=pod_name,
            position=position,
            employee_code=employee_code,
        )
        self.employees[employee.employee_id] = employee
        self._next_id += 1
        return employee.employee_id

    def update_fields(self, employee_id, changes):
        e = self.employees.get(int(employee_id))
        if not e:
            return False
        self.employees[e.employee_id] = replace(e, **changes)
        return True

    def count(self, *, role=None):
        return len(self.list_all(role=role))

    def count_by_pod(self, *, role=None):
        counts: dict = {}
        for e in self.list_all(role=role):
            counts[e.pod_name] = counts.get(e.pod_name, 0) + 1
        return list(counts.items())

    def count_in_pod(self, pod_name):
        return len(self.list_all(pod_name=pod_name))

    def delete_cascade(self, employee_id):
        employee_id = int(employee_id)
        tc = self._timecards.records
        for rid in [r.record_id for r in tc.values() if r.employee_id == employee_id]:
            del tc[rid]
        lv = self._leave.requests
        for rid in [r.request_id for r in lv.values() if r.employee_id == employee_id]:
            del lv[rid]
        for r in list(lv.values()):
            if r.approver_id == employee_id:
                lv[r.request_id] = replace(r, approver_id=None)
        ts = self._tasks.tasks
        for tid in [t.task_id for t in ts.values() if t.assigned_to_id == employee_id]:
            del ts[tid]
        for t in list(ts.values()):
            if t.assigned_by_id == employee_id:
                ts[t.task_id] = replace(t, assigned_by_id=None)
        return self.employees.pop(employee_id, None) is not None


class FakePodRepo:
    def __init__(self, employees: FakeEmployeeRepo):
        self.names: set[str] = set()
        self._employees = employees

    def list_names(self):
        return sorted(self.names)

    def exists(self, name):
        return name in self.names

    def add(self, name):
        if name in self.names:
            return False
        self.names.add(name)
        return True

    def remove(self, name):
        if self._employees.count_in_pod(name):
            raise PodInUse(f"POD {name} is in use")
        if name not in self.names:
            return False
        self.names.remove(name)
        return True


def add_employee(repos, *, first, last, role=Role.EMPLOYEE, pod=None, password="secret123") -> Identity:
    employee_id = repos.employees.create(
        first_name=first,
        last_name=last,
        email=f"{first.lower()}@example.com",
        password_hash=generate_password_hash(password, method=HASH_METHOD),
        role=role,
        pod_name=pod,
        position="Engineer",
    )
    return Identity(employee_id=employee_id, role=role)


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 1, 15, 9, 0))


@pytest.fixture
def repos():
    timecards = FakeTimecardRepo()
    leave = FakeLeaveRepo()
    tasks = FakeTaskRepo()
    employees = FakeEmployeeRepo(timecards=timecards, leave=leave, tasks=tasks)
    pods = FakePodRepo(employees)
    return SimpleNamespace(timecards=timecards, leave=leave, tasks=tasks, employees=employees, pods=pods)


@pytest.fixture
def staff(repos):
    """admin, manager and two Platform employees (alice, bob)."""

    repos.pods.add("Platform")
    repos.pods.add("Payments")
    return SimpleNamespace(
        admin=add_employee(repos, first="Ada", last="Admin", role=Role.ADMIN),
        manager=add_employee(repos, first="Max", last="Manager", role=Role.MANAGER, pod="Platform"),
        alice=add_employee(repos, first="Alice", last="Archer", pod="Platform"),
        bob=add_employee(repos, first="Bob", last="Baker", pod="Platform"),
    )


@pytest.fixture
def container(repos, clock):
    return wire_container(
        employees_repo=repos.employees,
        pods_repo=repos.pods,
        timecards_repo=repos.timecards,
        leave_repo=repos.leave,
        tasks_repo=repos.tasks,
        clock=clock,
    )


@pytest.fixture
def hire(repos):
    """Add an employee to the in-memory store and return their Identity."""

    def _hire(first, last, *, role=Role.EMPLOYEE, pod=None, password="secret123"):
        return add_employee(repos, first=first, last=last, role=role, pod=pod, password=password)

    return _hire
