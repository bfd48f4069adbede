from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_actor, json_body, login_required, role_required, to_json
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/applications/<int:application_id>/attendance", methods=["PUT"], endpoint="mark_attendance")
    @login_required
    def mark_attendance(application_id: int):
        body = json_body()
        result = container.attendance_tracker.mark_attendance(
            current_actor(),
            application_id,
            body.get("attendanceStatus"),
        )
        payload = to_json(result.application)
        if result.penalty is not None:
            payload["penaltyIssued"] = to_json(result.penalty)
        return jsonify(payload)

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @role_required(Role.ADMIN)
    def admin_attendance():
        overview = container.attendance_report_service.build_overview(current_actor())
        return jsonify(to_json(overview))
