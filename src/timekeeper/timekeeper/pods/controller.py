from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_identity, json_body, login_required, roles_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/pods", methods=["GET"], endpoint="pods_list")
    @login_required
    def list_pods():
        return jsonify([p.to_dict() for p in container.pod_service.list_pods()])

    @app.route("/api/pods", methods=["POST"], endpoint="pods_add")
    @roles_required(Role.ADMIN)
    def add_pod():
        pod = container.pod_service.add_pod(current=current_identity(), name=json_body().get("name"))
        return jsonify(pod.to_dict()), 201

    @app.route("/api/pods/<path:name>", methods=["DELETE"], endpoint="pods_remove")
    @roles_required(Role.ADMIN)
    def remove_pod(name: str):
        container.pod_service.remove_pod(current=current_identity(), name=name)
        return jsonify({"message": f"POD {name} removed"})
