from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PostStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Post
from .repository import PostRepository

_SELECT_POST = """
    SELECT p.post_id, p.author_id, p.organization_id, p.title, p.description, p.category, p.status,
           p.location, p.start_date, p.end_date, p.created_at, u.name AS author_name
    FROM posts p
    JOIN users u ON u.user_id = p.author_id
"""


class MySQLPostRepository(PostRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_post(r: dict) -> Post:
        return Post(
            post_id=int(r["post_id"]),
            author_id=int(r["author_id"]),
            organization_id=r.get("organization_id"),
            title=r["title"],
            category=r["category"],
            status=PostStatus(r["status"]),
            location=r.get("location"),
            start_date=r.get("start_date"),
            end_date=r.get("end_date"),
            description=r.get("description"),
            created_at=r.get("created_at"),
            author_name=r.get("author_name"),
        )

    def get_by_id(self, post_id: int) -> Optional[Post]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_POST + " WHERE p.post_id=%s", (int(post_id),))
            r = fetchone(cur)
            return self._to_post(r) if r else None

    def get_organization_id_for_user(self, user_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT organization_id FROM organizations WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return int(r["organization_id"]) if r else None

    def create_post(
        self,
        *,
        author_id: int,
        organization_id: Optional[int],
        title: str,
        category: str,
        status: PostStatus,
        location: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO posts(author_id, organization_id, title, description, category, status,
                                  location, start_date, end_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(author_id),
                    organization_id,
                    title,
                    description,
                    category,
                    status.value,
                    location,
                    start_date,
                    end_date,
                ),
            )
            return int(cur.lastrowid)

    def update_post(
        self,
        *,
        post_id: int,
        title: str,
        category: str,
        status: PostStatus,
        location: Optional[str],
        start_date: Optional[datetime],
        end_date: Optional[datetime],
        description: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE posts
                SET title=%s, description=%s, category=%s, status=%s, location=%s, start_date=%s, end_date=%s
                WHERE post_id=%s
                """,
                (title, description, category, status.value, location, start_date, end_date, int(post_id)),
            )
            # rowcount is 0 when the values did not change; treat existence as success.
            return cur.rowcount > 0 or self._exists(cur, post_id)

    @staticmethod
    def _exists(cur, post_id: int) -> bool:
        cur.execute("SELECT 1 AS found FROM posts WHERE post_id=%s", (int(post_id),))
        return fetchone(cur) is not None

    def set_status(self, *, post_id: int, status: PostStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE posts SET status=%s WHERE post_id=%s", (status.value, int(post_id)))
            return cur.rowcount > 0

    def delete_post(self, post_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM posts WHERE post_id=%s", (int(post_id),))
            return cur.rowcount > 0

    def list_posts(
        self,
        *,
        status: PostStatus,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[Post]:
        sql = _SELECT_POST + " WHERE p.status=%s"
        params: list = [status.value]
        if category:
            sql += " AND p.category=%s"
            params.append(category)
        if search:
            # utf8mb4_unicode_ci makes LIKE case-insensitive.
            sql += " AND (p.title LIKE %s OR p.description LIKE %s)"
            pattern = f"%{search}%"
            params.extend([pattern, pattern])
        sql += " ORDER BY p.created_at DESC, p.post_id DESC"
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [self._to_post(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM posts")
            return int(fetchone(cur)["n"])

    def count_by_status(self, status: PostStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM posts WHERE status=%s", (status.value,))
            return int(fetchone(cur)["n"])
