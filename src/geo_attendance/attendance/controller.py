from __future__ import annotations

from flask import Flask, g, request

from ..common.web import error_response, json_response, login_required
from ..core.enums import AttendanceType
from ..core.exceptions import DomainError


def register(app: Flask) -> None:
    def _view_all() -> bool:
        return request.args.get("view") == "all" or bool((request.get_json(silent=True) or {}).get("view_all"))

    def _state_payload(workspace) -> dict:
        check = workspace.geofence_check()
        actions = workspace.enabled_actions()
        return {
            "state": workspace.current_state().value,
            "is_checked_in": workspace.is_checked_in(),
            "can_check_in": actions[AttendanceType.CHECK_IN],
            "can_check_out": actions[AttendanceType.CHECK_OUT],
            "location": workspace.state.location.to_dict() if workspace.state.location else None,
            "location_error": workspace.state.location_error,
            "geofence": check.to_dict() if check else None,
            "error": workspace.state.last_error,
        }

    def _submit(requested: AttendanceType, success_message: str):
        workspace = g.workspace
        data = request.get_json(silent=True) or {}
        try:
            record = workspace.submit(requested, note=data.get("note"))
        except DomainError as e:
            return error_response(e, **_state_payload(workspace))
        return json_response(True, success_message, record=record.to_dict(), **_state_payload(workspace))

    @app.route("/api/attendance/state", methods=["GET"], endpoint="attendance_state")
    @login_required
    def attendance_state():
        return json_response(True, **_state_payload(g.workspace))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        workspace = g.workspace
        view_all = _view_all()
        if view_all and not workspace.user.is_admin:
            return json_response(False, "Admin access required", 403)

        if request.args.get("refresh") == "1":
            workspace.load_records()

        groups = workspace.grouped_records(view_all=view_all)
        return json_response(
            True,
            view_all=view_all,
            groups=[grp.to_dict() for grp in groups],
            error=workspace.state.last_error,
        )

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="check_in")
    @login_required
    def check_in():
        return _submit(AttendanceType.CHECK_IN, "Checked in")

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="check_out")
    @login_required
    def check_out():
        return _submit(AttendanceType.CHECK_OUT, "Checked out")

    @app.route("/api/attendance/summary", methods=["POST"], endpoint="attendance_summary")
    @login_required
    def attendance_summary():
        workspace = g.workspace
        view_all = _view_all()
        if view_all and not workspace.user.is_admin:
            return json_response(False, "Admin access required", 403)

        summary = workspace.generate_summary(view_all=view_all)
        if summary is None:
            return json_response(False, "No records to summarize", 400)
        return json_response(True, summary=summary)
