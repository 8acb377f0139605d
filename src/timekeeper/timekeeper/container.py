from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.classifier import AttendanceClassifier
from .attendance.service import AttendanceService
from .common.datetime_utils import now_local
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .pods.mysql_pod_repository import MySQLPodRepository
from .pods.repository import PodRepository
from .pods.service import PodService
from .reports.service import TimecardReportService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.repository import TaskRepository
from .tasks.service import TaskService
from .timecards.mysql_timecard_repository import MySQLTimecardRepository
from .timecards.repository import TimecardRepository
from .timecards.service import ClockService


@dataclass(frozen=True)
class Container:
    clock: Callable[[], datetime]

    employees_repo: EmployeeRepository
    pods_repo: PodRepository
    timecards_repo: TimecardRepository
    leave_repo: LeaveRepository
    tasks_repo: TaskRepository

    auth_service: AuthService
    employee_service: EmployeeService
    pod_service: PodService
    clock_service: ClockService
    attendance_service: AttendanceService
    leave_service: LeaveService
    task_service: TaskService
    dashboard_service: DashboardService
    timecard_report_service: TimecardReportService


def wire_container(
    *,
    employees_repo: EmployeeRepository,
    pods_repo: PodRepository,
    timecards_repo: TimecardRepository,
    leave_repo: LeaveRepository,
    tasks_repo: TaskRepository,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Build every service on top of the given repositories."""

    classifier = AttendanceClassifier()

    return Container(
        clock=clock,
        employees_repo=employees_repo,
        pods_repo=pods_repo,
        timecards_repo=timecards_repo,
        leave_repo=leave_repo,
        tasks_repo=tasks_repo,
        auth_service=AuthService(employees_repo, pods_repo),
        employee_service=EmployeeService(employees_repo, pods_repo),
        pod_service=PodService(pods_repo, employees_repo),
        clock_service=ClockService(timecards_repo, clock=clock),
        attendance_service=AttendanceService(timecards_repo, employees_repo, classifier=classifier),
        leave_service=LeaveService(leave_repo, employees_repo),
        task_service=TaskService(tasks_repo, employees_repo, clock=clock),
        dashboard_service=DashboardService(
            employees=employees_repo,
            timecards=timecards_repo,
            leave=leave_repo,
            tasks=tasks_repo,
            pods=pods_repo,
            classifier=classifier,
            clock=clock,
        ),
        timecard_report_service=TimecardReportService(timecards_repo, employees_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    return wire_container(
        employees_repo=MySQLEmployeeRepository(conn),
        pods_repo=MySQLPodRepository(conn),
        timecards_repo=MySQLTimecardRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
    )
