from __future__ import annotations

from datetime import datetime

import pytest

from src.volunteer_hub.volunteer_hub.core.enums import Role
from src.volunteer_hub.volunteer_hub.main import create_app
from tests.fakes import World


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 6, 1, 12, 0, 0)


@pytest.fixture
def world() -> World:
    return World()


@pytest.fixture
def organization(world):
    return world.add_user(Role.ORGANIZATION, name="Green Org")


@pytest.fixture
def volunteer(world):
    return world.add_user(Role.VOLUNTEER, name="Vera Volunteer")


@pytest.fixture
def admin(world):
    return world.add_user(Role.ADMIN, name="Ada Admin")


@pytest.fixture
def app(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=world.container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    """Put an actor into the Flask session without going through /api/auth/login."""

    def _login(actor):
        with client.session_transaction() as sess:
            sess["user_id"] = actor.user_id
            sess["name"] = actor.name
            sess["role"] = actor.role.value
        return client

    return _login
