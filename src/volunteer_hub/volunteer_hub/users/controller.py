from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, session

from ..common.http import current_actor, json_body, login_required, to_json
from ..core.constants import DEFAULT_SESSION_DAYS
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/signup", methods=["POST"], endpoint="signup")
    def signup():
        body = json_body()
        user_id = container.user_service.register(
            name=body.get("name"),
            email=body.get("email"),
            password=body.get("password"),
            role=body.get("role"),
        )
        return jsonify({"id": user_id}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        s_user = container.auth_service.authenticate(body.get("email"), body.get("password"))

        session.permanent = bool(body.get("rememberMe"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value
        return jsonify({"id": s_user.user_id, "name": s_user.name, "role": s_user.role.value})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        actor = current_actor()
        return jsonify({"id": actor.user_id, "name": actor.name, "role": actor.role.value})

    @app.route("/api/profile", methods=["GET"], endpoint="get_profile")
    @login_required
    def get_profile():
        return jsonify(to_json(container.profile_service.get(current_actor())))

    @app.route("/api/profile", methods=["PUT"], endpoint="update_profile")
    @login_required
    def update_profile():
        body = json_body()
        profile = container.profile_service.update(
            current_actor(),
            name=body.get("name"),
            bio=body.get("bio"),
            location=body.get("location"),
            skills=body.get("skills"),
        )
        session["name"] = profile.name
        return jsonify(to_json(profile))

    @app.route("/api/volunteers", methods=["GET"], endpoint="list_volunteers")
    @login_required
    def list_volunteers():
        return jsonify(to_json(list(container.profile_service.list_volunteers())))
