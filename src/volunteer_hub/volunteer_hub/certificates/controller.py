from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_actor, json_body, login_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/certificates", methods=["GET"], endpoint="list_certificates")
    @login_required
    def list_certificates():
        return jsonify(to_json(list(container.certificate_service.list_for_actor(current_actor()))))

    @app.route("/api/certificates", methods=["POST"], endpoint="issue_certificate")
    @login_required
    def issue_certificate():
        body = json_body()
        certificate = container.certificate_service.issue(
            current_actor(),
            post_id=body.get("postId"),
            volunteer_id=body.get("volunteerId"),
            title=body.get("title"),
            description=body.get("description"),
            certificate_url=body.get("certificateUrl"),
        )
        return jsonify(to_json(certificate)), 201

    @app.route("/api/certificates/bulk", methods=["POST"], endpoint="bulk_issue_certificates")
    @login_required
    def bulk_issue_certificates():
        body = json_body()
        result = container.certificate_service.bulk_issue(
            current_actor(),
            post_id=body.get("postId"),
            title=body.get("title"),
            description=body.get("description"),
            certificate_url=body.get("certificateUrl"),
        )
        return jsonify(to_json(result))
