from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_identity, json_body, login_required, parse_date_arg, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    def _render(tasks):
        today = container.clock().date()
        return [t.to_dict(today=today) for t in tasks]

    @app.route("/api/tasks", methods=["POST"], endpoint="tasks_create")
    @login_required
    def create():
        body = json_body()
        task = container.task_service.create(
            current=current_identity(),
            title=body.get("title"),
            description=body.get("description"),
            due_date=body.get("dueDate"),
            estimated_hours=body.get("estimatedHours"),
            priority=body.get("priority"),
            start_date=body.get("startDate"),
            assigned_to_id=body.get("assignedToId"),
        )
        return jsonify(task.to_dict(today=container.clock().date())), 201

    @app.route("/api/tasks", methods=["GET"], endpoint="tasks_list")
    @login_required
    def list_tasks():
        tasks = container.task_service.list_tasks(
            current=current_identity(),
            status=request.args.get("status") or None,
            priority=request.args.get("priority") or None,
            start_date=parse_date_arg("startDate"),
            end_date=parse_date_arg("endDate"),
        )
        return jsonify(_render(tasks))

    @app.route("/api/tasks/<int:task_id>", methods=["GET"], endpoint="tasks_get")
    @login_required
    def get_task(task_id: int):
        task = container.task_service.get(current=current_identity(), task_id=task_id)
        return jsonify(task.to_dict(today=container.clock().date()))

    @app.route("/api/tasks/<int:task_id>", methods=["PUT"], endpoint="tasks_update")
    @login_required
    def update(task_id: int):
        task = container.task_service.update(current=current_identity(), task_id=task_id, payload=json_body())
        return jsonify(task.to_dict(today=container.clock().date()))

    @app.route("/api/tasks/<int:task_id>/status", methods=["PUT"], endpoint="tasks_update_status")
    @login_required
    def update_status(task_id: int):
        body = json_body()
        task = container.task_service.update_status(
            current=current_identity(),
            task_id=task_id,
            status=body.get("status"),
        )
        return jsonify(task.to_dict(today=container.clock().date()))

    @app.route("/api/tasks/<int:task_id>", methods=["DELETE"], endpoint="tasks_delete")
    @login_required
    def delete(task_id: int):
        container.task_service.delete(current=current_identity(), task_id=task_id)
        return jsonify({"message": "Task deleted"})

    @app.route("/api/manager/employees/<int:employee_id>/tasks", methods=["GET"], endpoint="manager_employee_tasks")
    @roles_required(Role.MANAGER, Role.ADMIN)
    def employee_tasks(employee_id: int):
        tasks = container.task_service.list_for_employee(current=current_identity(), employee_id=employee_id)
        return jsonify(_render(tasks))
