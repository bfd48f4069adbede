from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.http import current_actor, json_body, login_required, role_required, to_json
from ..core.enums import Role
from ..container import Container
from .model import Penalty, is_effective


def _penalty_json(penalty: Penalty, now) -> dict:
    data = to_json(penalty)
    data["effective"] = is_effective(penalty, now)
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/penalties", methods=["GET"], endpoint="admin_penalties")
    @role_required(Role.ADMIN)
    def admin_penalties():
        now = now_local()
        return jsonify([_penalty_json(p, now) for p in container.penalty_escalator.list_all(current_actor())])

    @app.route("/api/admin/penalties", methods=["POST"], endpoint="create_penalty")
    @role_required(Role.ADMIN)
    def create_penalty():
        body = json_body()
        penalty = container.penalty_escalator.create_penalty(
            current_actor(),
            user_id=body.get("userId"),
            type=body.get("type"),
            reason=body.get("reason"),
            description=body.get("description"),
            expires_at=body.get("expiresAt"),
        )
        return jsonify(_penalty_json(penalty, now_local())), 201

    @app.route("/api/admin/penalties/<int:penalty_id>", methods=["PUT"], endpoint="update_penalty")
    @role_required(Role.ADMIN)
    def update_penalty(penalty_id: int):
        body = json_body()
        penalty = container.penalty_escalator.update_status(current_actor(), penalty_id, body.get("status"))
        return jsonify(_penalty_json(penalty, now_local()))

    @app.route("/api/admin/penalties/<int:penalty_id>", methods=["DELETE"], endpoint="delete_penalty")
    @role_required(Role.ADMIN)
    def delete_penalty(penalty_id: int):
        container.penalty_escalator.delete_penalty(current_actor(), penalty_id)
        return jsonify({"success": True})

    @app.route("/api/penalties/my", methods=["GET"], endpoint="my_penalties")
    @login_required
    def my_penalties():
        now = now_local()
        penalties = container.penalty_escalator.list_for_user(current_actor().user_id, now=now)
        return jsonify(
            {
                "active": [_penalty_json(p, now) for p in penalties.active],
                "all": [_penalty_json(p, now) for p in penalties.all],
            }
        )
