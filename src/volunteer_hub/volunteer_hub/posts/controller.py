from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_actor, json_body, login_required, role_required, to_json
from ..core.enums import Role
from ..container import Container


def _post_fields(body: dict) -> dict:
    return {
        "title": body.get("title"),
        "category": body.get("category", "OTHER"),
        "description": body.get("description"),
        "location": body.get("location"),
        "start_date": body.get("startDate"),
        "end_date": body.get("endDate"),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/posts", methods=["GET"], endpoint="list_posts")
    def list_posts():
        posts = container.post_service.list_published(
            category=request.args.get("category"),
            search=request.args.get("search"),
        )
        return jsonify(to_json(list(posts)))

    @app.route("/api/posts", methods=["POST"], endpoint="create_post")
    @role_required(Role.ORGANIZATION, Role.ADMIN)
    def create_post():
        post = container.post_service.create(current_actor(), **_post_fields(json_body()))
        return jsonify(to_json(post)), 201

    @app.route("/api/posts/<int:post_id>", methods=["GET"], endpoint="get_post")
    @login_required
    def get_post(post_id: int):
        return jsonify(to_json(container.post_service.get(post_id)))

    @app.route("/api/posts/<int:post_id>", methods=["PUT"], endpoint="update_post")
    @role_required(Role.ORGANIZATION, Role.ADMIN)
    def update_post(post_id: int):
        body = json_body()
        post = container.post_service.update(current_actor(), post_id, status=body.get("status"), **_post_fields(body))
        return jsonify(to_json(post))

    @app.route("/api/posts/<int:post_id>", methods=["DELETE"], endpoint="delete_post")
    @login_required
    def delete_post(post_id: int):
        container.post_service.delete(current_actor(), post_id)
        return jsonify({"message": "Post deleted successfully"})

    @app.route("/api/posts/<int:post_id>/publish", methods=["POST"], endpoint="publish_post")
    @role_required(Role.ORGANIZATION, Role.ADMIN)
    def publish_post(post_id: int):
        return jsonify(to_json(container.post_service.publish(current_actor(), post_id)))

    @app.route("/api/posts/<int:post_id>/flag", methods=["POST"], endpoint="flag_post")
    @login_required
    def flag_post(post_id: int):
        return jsonify(to_json(container.post_service.flag(current_actor(), post_id)))

    @app.route("/api/admin/approve-post/<int:post_id>", methods=["POST"], endpoint="approve_post")
    @role_required(Role.ADMIN)
    def approve_post(post_id: int):
        return jsonify(to_json(container.post_service.approve(current_actor(), post_id)))
