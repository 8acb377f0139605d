"""Timekeeper package.

Employee time/attendance and task tracking, organized by feature modules
(timecards, attendance, dashboard, leave, tasks, ...) with a thin Flask
controller layer over service/repository layers.
"""
