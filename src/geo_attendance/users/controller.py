from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, request, session

from ..common.web import error_response, json_response, login_required
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    def _start_session(user, *, remember: bool):
        previous = session.get("workspace_token")
        if previous:
            container.sessions.close(previous)
        session.clear()
        session.permanent = remember
        token = container.sessions.new_token()
        session["user_id"] = user.id
        session["role"] = user.role.value
        session["workspace_token"] = token
        container.sessions.open(token, user)
        return json_response(True, f"Welcome, {user.display_name}", user=user.to_dict())

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_account():
        data = request.get_json(silent=True) or {}
        try:
            role = Role(str(data.get("role") or Role.STUDENT.value).upper())
        except ValueError:
            return json_response(False, "Unknown role", 400)

        try:
            user = container.auth_service.register(
                email=data.get("email", ""),
                password=data.get("password", ""),
                name=data.get("name", ""),
                role=role,
            )
        except DomainError as e:
            return error_response(e)
        return _start_session(user, remember=False)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or {}
        try:
            user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except DomainError as e:
            return error_response(e)
        return _start_session(user, remember=bool(data.get("remember_me")))

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        token = session.get("workspace_token")
        if token:
            container.sessions.close(token)
        session.clear()
        return json_response(True, "Logged out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return json_response(True, user=g.workspace.user.to_dict())
