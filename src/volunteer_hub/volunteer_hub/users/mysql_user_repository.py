from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_violation_as_conflict
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, name, email, password_hash, role, bio, location, skills, created_at"


def _load_skills(raw) -> tuple[str, ...]:
    if not raw:
        return ()
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    return tuple(json.loads(raw) if isinstance(raw, str) else raw)


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_user(row: dict) -> User:
        return User(
            user_id=int(row["user_id"]),
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            role=Role(row["role"]),
            bio=row.get("bio"),
            location=row.get("location"),
            skills=_load_skills(row.get("skills")),
            created_at=row.get("created_at"),
        )

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return self._to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return self._to_user(row) if row else None

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        with unique_violation_as_conflict("User already exists"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users(name, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                    (name, email, password_hash, role.value),
                )
                return int(cur.lastrowid)

    def create_organization(self, *, user_id: int, name: str) -> int:
        with unique_violation_as_conflict("Organization already exists"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO organizations(user_id, name) VALUES(%s,%s)",
                    (int(user_id), name),
                )
                return int(cur.lastrowid)

    def get_organization_name(self, user_id: int) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT name FROM organizations WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return row["name"] if row else None

    def update_profile(
        self,
        *,
        user_id: int,
        name: str,
        bio: Optional[str],
        location: Optional[str],
        skills: Sequence[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET name=%s, bio=%s, location=%s, skills=%s WHERE user_id=%s",
                (name, bio, location, json.dumps(list(skills)), int(user_id)),
            )
            # rowcount is 0 when the values did not change; treat existence as success.
            return cur.rowcount > 0 or self._exists(cur, user_id)

    @staticmethod
    def _exists(cur, user_id: int) -> bool:
        cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (int(user_id),))
        return fetchone(cur) is not None

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE role=%s ORDER BY created_at DESC, user_id DESC",
                (role.value,),
            )
            return [self._to_user(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM users")
            return int(fetchone(cur)["n"])
