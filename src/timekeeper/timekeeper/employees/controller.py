from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.http import current_identity, json_body, login_required, roles_required
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    def _start_session(employee, *, remember: bool = False) -> None:
        session.clear()
        session.permanent = remember
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["employee_id"] = employee.employee_id
        session["role"] = employee.role.value

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        employee = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))
        _start_session(employee, remember=bool(body.get("rememberMe")))
        return jsonify(employee.to_dict())

    @app.route("/api/auth/signup", methods=["POST"], endpoint="auth_signup")
    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def signup():
        body = json_body()
        employee = container.auth_service.register(
            first_name=body.get("firstName"),
            last_name=body.get("lastName"),
            email=body.get("email"),
            password=body.get("password"),
            pod_name=body.get("podName"),
            position=body.get("position") or "",
            employee_code=body.get("employeeCode"),
        )
        _start_session(employee)
        return jsonify(employee.to_dict()), 201

    @app.route("/api/auth/forgot-password", methods=["POST"], endpoint="auth_forgot_password")
    def forgot_password():
        token = container.auth_service.request_password_reset(
            json_body().get("email"), secret_key=app.secret_key
        )
        payload = {"message": "Password reset instructions have been sent to your email"}
        if app.debug or app.testing:
            payload["resetToken"] = token
        return jsonify(payload)

    @app.route("/api/auth/reset-password", methods=["POST"], endpoint="auth_reset_password")
    def reset_password():
        body = json_body()
        container.auth_service.reset_password(
            body.get("token"), body.get("newPassword"), secret_key=app.secret_key
        )
        return jsonify({"message": "Password has been reset successfully"})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me():
        identity = current_identity()
        employee = container.employee_service.get(current=identity, employee_id=identity.employee_id)
        return jsonify(employee.to_dict())

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @roles_required(Role.ADMIN)
    def list_employees():
        employees = container.employee_service.list_all(current=current_identity())
        return jsonify([e.to_dict() for e in employees])

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @roles_required(Role.ADMIN)
    def create_employee():
        body = json_body()
        employee = container.employee_service.create_account(
            current=current_identity(),
            first_name=body.get("firstName"),
            last_name=body.get("lastName"),
            email=body.get("email"),
            password=body.get("password"),
            role=body.get("role") or Role.EMPLOYEE,
            pod_name=body.get("podName"),
            position=body.get("position") or "",
            employee_code=body.get("employeeCode"),
        )
        return jsonify(employee.to_dict()), 201

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def get_employee(employee_id: int):
        employee = container.employee_service.get(current=current_identity(), employee_id=employee_id)
        return jsonify(employee.to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @login_required
    def update_employee(employee_id: int):
        employee = container.employee_service.update_profile(
            current=current_identity(),
            employee_id=employee_id,
            payload=json_body(),
        )
        return jsonify(employee.to_dict())

    @app.route("/api/employees/<int:employee_id>/role", methods=["PUT"], endpoint="employees_role")
    @roles_required(Role.ADMIN)
    def change_role(employee_id: int):
        employee = container.employee_service.change_role(
            current=current_identity(),
            employee_id=employee_id,
            role=json_body().get("role"),
        )
        return jsonify(employee.to_dict())

    @app.route("/api/employees/<int:employee_id>/pod", methods=["PUT"], endpoint="employees_pod")
    @roles_required(Role.ADMIN)
    def assign_pod(employee_id: int):
        employee = container.employee_service.assign_pod(
            current=current_identity(),
            employee_id=employee_id,
            pod_name=json_body().get("podName"),
        )
        return jsonify(employee.to_dict())

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @roles_required(Role.ADMIN)
    def delete_employee(employee_id: int):
        container.employee_service.delete_employee(current=current_identity(), employee_id=employee_id)
        return jsonify({"message": "Employee deleted"})
