from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, success
from ..container import Container
from .service import CatalogService


def _register_catalog(app: Flask, container: Container, *, collection: str, service: CatalogService) -> None:
    admin_required = container.admin_required

    @app.route(f"/api/{collection}", methods=["GET"], endpoint=f"api_list_{collection}")
    def public_list():
        return jsonify(service.list_all())

    @app.route(f"/admin/{collection}", methods=["GET"], endpoint=f"admin_list_{collection}")
    @admin_required
    def admin_list():
        return jsonify(service.list_all())

    @app.route(f"/admin/{collection}", methods=["POST"], endpoint=f"admin_create_{collection}")
    @admin_required
    def admin_create():
        service.create(json_body().get("name"))
        return success()

    @app.route(f"/admin/{collection}/<int(max=2147483647):item_id>", methods=["PUT"], endpoint=f"admin_update_{collection}")
    @admin_required
    def admin_update(item_id: int):
        service.rename(item_id, json_body().get("name"))
        return success()

    @app.route(f"/admin/{collection}/<int(max=2147483647):item_id>", methods=["DELETE"], endpoint=f"admin_delete_{collection}")
    @admin_required
    def admin_delete(item_id: int):
        service.delete(item_id)
        return success()


def register(app: Flask, container: Container) -> None:
    _register_catalog(app, container, collection="employees", service=container.employee_service)
    _register_catalog(app, container, collection="locations", service=container.location_service)
