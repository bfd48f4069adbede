from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import current_actor, json_body, role_required, to_json
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/flagged-posts", methods=["GET"], endpoint="flagged_posts")
    @role_required(Role.ADMIN)
    def flagged_posts():
        return jsonify(to_json(list(container.moderation_service.flagged_posts(current_actor()))))

    @app.route("/api/admin/moderate/<int:post_id>", methods=["POST"], endpoint="moderate_post")
    @role_required(Role.ADMIN)
    def moderate_post(post_id: int):
        body = json_body()
        container.moderation_service.moderate(current_actor(), post_id, body.get("action"))
        return jsonify({"message": "Post moderated successfully"})

    @app.route("/api/admin/stats", methods=["GET"], endpoint="admin_stats")
    @role_required(Role.ADMIN)
    def admin_stats():
        return jsonify(to_json(container.moderation_service.stats(current_actor())))
