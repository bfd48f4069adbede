from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import PenaltyStatus, PenaltyType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import Penalty
from .repository import PenaltyRepository

_COLUMNS = """
    penalty_id, user_id, type, status, reason, description,
    expires_at, created_at, resolved_at, issued_by
"""


class MySQLPenaltyRepository(PenaltyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_penalty(r: dict) -> Penalty:
        return Penalty(
            penalty_id=int(r["penalty_id"]),
            user_id=int(r["user_id"]),
            type=PenaltyType(r["type"]),
            status=PenaltyStatus(r["status"]),
            reason=r["reason"],
            description=r.get("description"),
            expires_at=r.get("expires_at"),
            created_at=r["created_at"],
            resolved_at=r.get("resolved_at"),
            issued_by=r.get("issued_by"),
        )

    def create(
        self,
        *,
        user_id: int,
        type: PenaltyType,
        reason: str,
        created_at: datetime,
        description: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        issued_by: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO penalties(user_id, type, status, reason, description, expires_at, created_at, issued_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    type.value,
                    PenaltyStatus.ACTIVE.value,
                    reason,
                    description,
                    expires_at,
                    created_at,
                    issued_by,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, penalty_id: int) -> Optional[Penalty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM penalties WHERE penalty_id=%s", (int(penalty_id),))
            r = fetchone(cur)
            return self._to_penalty(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[Penalty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM penalties WHERE user_id=%s ORDER BY created_at DESC",
                (int(user_id),),
            )
            return [self._to_penalty(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Penalty]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM penalties ORDER BY created_at DESC")
            return [self._to_penalty(r) for r in fetchall(cur)]

    def list_active_for_users(self, user_ids: Iterable[int]) -> Sequence[Penalty]:
        ids = [int(u) for u in user_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM penalties
                WHERE status=%s AND user_id IN ({placeholders(len(ids))})
                """,
                (PenaltyStatus.ACTIVE.value, *ids),
            )
            return [self._to_penalty(r) for r in fetchall(cur)]

    def update_status(
        self,
        *,
        penalty_id: int,
        status: PenaltyStatus,
        resolved_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if resolved_at is not None:
                cur.execute(
                    "UPDATE penalties SET status=%s, resolved_at=%s WHERE penalty_id=%s",
                    (status.value, resolved_at, int(penalty_id)),
                )
            else:
                cur.execute(
                    "UPDATE penalties SET status=%s WHERE penalty_id=%s",
                    (status.value, int(penalty_id)),
                )
            return cur.rowcount > 0

    def delete(self, penalty_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM penalties WHERE penalty_id=%s", (int(penalty_id),))
            return cur.rowcount > 0
