from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import to_iso
from ..common.http import current_actor, json_body, login_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/applications", methods=["POST"], endpoint="create_application")
    @login_required
    def create_application():
        body = json_body()
        application = container.application_service.apply(
            current_actor(),
            post_id=body.get("postId"),
            message=body.get("message"),
        )
        return jsonify(to_json(application)), 201

    @app.route("/api/applications/<int:application_id>", methods=["DELETE"], endpoint="withdraw_application")
    @login_required
    def withdraw_application(application_id: int):
        container.application_service.withdraw(current_actor(), application_id)
        return jsonify({"message": "Application withdrawn successfully"})

    @app.route("/api/applications/<int:application_id>", methods=["PATCH"], endpoint="decide_application")
    @login_required
    def decide_application(application_id: int):
        body = json_body()
        application = container.application_service.decide(current_actor(), application_id, body.get("status"))
        return jsonify(to_json(application))

    @app.route("/api/posts/<int:post_id>/applications", methods=["GET"], endpoint="post_applications")
    @login_required
    def post_applications(post_id: int):
        applications = container.application_service.list_for_post(current_actor(), post_id)
        return jsonify(to_json(list(applications)))

    @app.route("/api/eligibility", methods=["GET"], endpoint="my_eligibility")
    @login_required
    def my_eligibility():
        decision = container.eligibility_gate.check_apply(current_actor().user_id)
        penalty = decision.blocking_penalty
        return jsonify(
            {
                "action": decision.action.value,
                "allowed": decision.allowed,
                "reason": decision.reason,
                "penaltyType": penalty.type.value if penalty else None,
                "expiresAt": to_iso(penalty.expires_at) if penalty else None,
            }
        )
