from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code).
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    bio: Optional[str] = None
    location: Optional[str] = None
    skills: tuple[str, ...] = ()
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    role: Role


@dataclass(frozen=True)
class Profile:
    """User as shown to others: never carries the password hash."""

    user_id: int
    name: str
    email: str
    role: Role
    bio: Optional[str]
    location: Optional[str]
    skills: tuple[str, ...]
    organization_name: Optional[str] = None
    created_at: Optional[datetime] = None
