from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, success
from ..container import Container


def register(app: Flask, container: Container) -> None:
    admin_required = container.admin_required
    service = container.steps_service

    @app.route("/api/steps", methods=["POST"], endpoint="api_record_steps")
    def record_steps():
        data = json_body()
        service.record(
            data.get("employeeId"),
            data.get("locationId"),
            data.get("date"),
            data.get("steps"),
        )
        return success()

    @app.route("/api/averages", methods=["GET"], endpoint="api_averages")
    def averages():
        return jsonify(service.averages())

    @app.route("/admin/steps", methods=["GET"], endpoint="admin_list_steps")
    @admin_required
    def admin_list_steps():
        return jsonify(service.list_entries())

    @app.route("/admin/steps/<int(max=2147483647):entry_id>", methods=["PUT"], endpoint="admin_update_steps")
    @admin_required
    def admin_update_steps(entry_id: int):
        data = json_body()
        service.update(
            entry_id,
            steps=data.get("steps"),
            entry_date=data.get("date"),
            location_id=data.get("locationId"),
            employee_id=data.get("employeeId"),
        )
        return success()

    @app.route("/admin/steps/<int(max=2147483647):entry_id>", methods=["DELETE"], endpoint="admin_delete_steps")
    @admin_required
    def admin_delete_steps(entry_id: int):
        service.delete(entry_id)
        return success()
