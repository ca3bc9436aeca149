"""Helpers shared by the Flask controllers."""
from __future__ import annotations

from functools import wraps
from typing import Any

from flask import current_app, g, jsonify, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    EmailConfirmationRequiredError,
    PersistError,
)


def get_container():
    return current_app.extensions["geo_attendance"]


def json_response(success: bool, message: str = "", status: int = 200, **extra: Any):
    body = {"success": success, "message": message}
    body.update(extra)
    return jsonify(body), status


def error_response(e: DomainError, **extra: Any):
    """Map a domain error to its JSON response and status code."""
    if isinstance(e, EmailConfirmationRequiredError):
        return json_response(False, str(e), 403, email_confirmation_required=True, **extra)
    if isinstance(e, AuthenticationError):
        status = 401
    elif isinstance(e, AuthorizationError):
        status = 403
    elif isinstance(e, PersistError):
        status = 502
    else:
        status = 400
    return json_response(False, str(e), status, **extra)


def current_workspace():
    """AppController of this login, recreated after a process restart."""
    container = get_container()
    user_id = session.get("user_id")
    token = session.get("workspace_token")
    if not user_id or not token:
        return None

    workspace = container.sessions.get(token)
    if workspace is None or workspace.state.user is None or workspace.state.user.id != user_id:
        user = container.auth_service.get_session_user(user_id)
        if user is None:
            container.sessions.close(token)
            session.clear()
            return None
        workspace = container.sessions.open(token, user)
    return workspace


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        workspace = current_workspace()
        if workspace is None:
            return json_response(False, "Please log in to continue", 401)
        g.workspace = workspace
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not g.workspace.user.is_admin:
            return json_response(False, "Admin access required", 403)
        return view(*args, **kwargs)

    return wrapper
