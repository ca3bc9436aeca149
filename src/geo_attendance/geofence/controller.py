from __future__ import annotations

from flask import Flask, g, request

from ..common.web import admin_required, error_response, json_response, login_required
from ..core.constants import LOCATION_TIMEOUT_MS, MAX_RADIUS_METERS, MIN_RADIUS_METERS
from ..core.exceptions import DomainError
from .location import ReportedLocationProvider
from .model import WorkplaceConfig


def register(app: Flask) -> None:
    def _workplace_payload(config: WorkplaceConfig) -> dict:
        return {
            "workplace": config.to_dict(),
            "location_timeout_ms": LOCATION_TIMEOUT_MS,
            "radius_bounds": [MIN_RADIUS_METERS, MAX_RADIUS_METERS],
        }

    @app.route("/api/workplace", methods=["GET"], endpoint="workplace")
    @login_required
    def workplace():
        config = g.workspace.load_workplace()
        return json_response(True, **_workplace_payload(config))

    @app.route("/api/workplace", methods=["PUT"], endpoint="update_workplace")
    @admin_required
    def update_workplace():
        data = request.get_json(silent=True) or {}
        try:
            config = g.workspace.save_workplace(WorkplaceConfig.parse(data))
        except DomainError as e:
            return error_response(e)
        return json_response(True, "Workplace saved", **_workplace_payload(config))

    @app.route("/api/location", methods=["POST"], endpoint="report_location")
    @login_required
    def report_location():
        workspace = g.workspace
        try:
            location = workspace.report_location(ReportedLocationProvider(request.get_json(silent=True)))
        except DomainError as e:
            return error_response(e)

        check = workspace.geofence_check()
        return json_response(
            True,
            location=location.to_dict(),
            geofence=check.to_dict() if check else None,
        )
