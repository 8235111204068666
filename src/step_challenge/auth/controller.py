from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, success
from ..container import Container
from ..core.constants import SESSION_COOKIE_NAME
from .decorators import session_token


def register(app: Flask, container: Container) -> None:
    admin_required = container.admin_required
    auth = container.auth_service
    users = container.admin_user_service

    @app.route("/admin/login", methods=["POST"], endpoint="admin_login")
    def login():
        data = json_body()
        issued = auth.login(data.get("email"), data.get("password"))
        response = success()
        response.set_cookie(
            SESSION_COOKIE_NAME,
            issued.token,
            max_age=issued.max_age,
            path="/",
            httponly=True,
        )
        return response

    @app.route("/admin/logout", methods=["POST"], endpoint="admin_logout")
    @admin_required
    def logout():
        auth.logout(session_token())
        response = success()
        response.set_cookie(SESSION_COOKIE_NAME, "", max_age=0, path="/", httponly=True)
        return response

    @app.route("/admin/check", methods=["GET"], endpoint="admin_check")
    def check():
        return jsonify({"loggedIn": auth.is_logged_in(session_token())})

    @app.route("/admin/users", methods=["GET"], endpoint="admin_list_users")
    @admin_required
    def list_users():
        return jsonify(users.list_all())

    @app.route("/admin/users", methods=["POST"], endpoint="admin_create_user")
    @admin_required
    def create_user():
        data = json_body()
        users.create(data.get("email"), data.get("password"))
        return success()

    @app.route("/admin/users/<int(max=2147483647):user_id>", methods=["PUT"], endpoint="admin_update_user")
    @admin_required
    def update_user(user_id: int):
        data = json_body()
        users.update(user_id, email=data.get("email"), password=data.get("password"))
        return success()

    @app.route("/admin/users/<int(max=2147483647):user_id>", methods=["DELETE"], endpoint="admin_delete_user")
    @admin_required
    def delete_user(user_id: int):
        users.delete(user_id)
        return success()
