from __future__ import annotations

import logging
from typing import Any, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_str, parse_enum, require_email, require_min_length, require_non_empty
from ..core.actor import Actor
from ..core.constants import MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import Profile, SessionUser, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: Any, password: Any) -> SessionUser:
        email = require_email(email)
        password = require_non_empty(password, "password")

        user = self._users.get_by_email(email)
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, name=user.name, role=user.role)


class UserService:
    """Use case: self-service sign-up for volunteers and organizations."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, name: Any, email: Any, password: Any, role: Any) -> int:
        name = require_min_length(name, "name", MIN_NAME_LENGTH)
        email = require_email(email)
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
            )
        role = parse_enum(Role, role, "role")
        if role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be created by sign-up", field="role")

        if self._users.get_by_email(email):
            raise ConflictError("User already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        if role == Role.ORGANIZATION:
            self._users.create_organization(user_id=user_id, name=name)

        logger.info("registered %s account %s", role.value, user_id)
        return user_id


def _require_skills(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
        raise ValidationError("skills must be a list of strings", field="skills")
    return tuple(s.strip() for s in value if s.strip())


class ProfileService:
    """Own profile (read/update) and the volunteer directory."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _profile(self, user: User) -> Profile:
        organization_name = None
        if user.role == Role.ORGANIZATION:
            organization_name = self._users.get_organization_name(user.user_id)
        return Profile(
            user_id=user.user_id,
            name=user.name,
            email=user.email,
            role=user.role,
            bio=user.bio,
            location=user.location,
            skills=user.skills,
            organization_name=organization_name,
            created_at=user.created_at,
        )

    def _get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def get(self, actor: Actor) -> Profile:
        return self._profile(self._get_user(actor.user_id))

    def update(
        self,
        actor: Actor,
        *,
        name: Any = None,
        bio: Any = None,
        location: Any = None,
        skills: Any = None,
    ) -> Profile:
        """Partial update: fields left as None keep their value; an empty bio or location clears it."""
        user = self._get_user(actor.user_id)

        self._users.update_profile(
            user_id=user.user_id,
            name=require_min_length(name, "name", MIN_NAME_LENGTH) if name is not None else user.name,
            bio=optional_str(bio) if bio is not None else user.bio,
            location=optional_str(location) if location is not None else user.location,
            skills=_require_skills(skills) if skills is not None else user.skills,
        )
        logger.info("user %s updated their profile", user.user_id)
        return self.get(actor)

    def list_volunteers(self) -> Sequence[Profile]:
        return [self._profile(u) for u in self._users.list_by_role(Role.VOLUNTEER)]
