from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, unique_violation_as_conflict
from .model import Certificate
from .repository import CertificateRepository

_COLUMNS = """
    c.certificate_id, c.volunteer_id, c.post_id, c.organization_id, c.title,
    c.description, c.certificate_url, c.issued_date, c.verified
"""


class MySQLCertificateRepository(CertificateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_certificate(r: dict) -> Certificate:
        return Certificate(
            certificate_id=int(r["certificate_id"]),
            volunteer_id=int(r["volunteer_id"]),
            post_id=int(r["post_id"]),
            organization_id=r.get("organization_id"),
            title=r["title"],
            description=r.get("description"),
            certificate_url=r.get("certificate_url"),
            issued_date=r["issued_date"],
            verified=bool(r.get("verified", True)),
        )

    def get_for_volunteer_and_post(self, *, volunteer_id: int, post_id: int) -> Optional[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM certificates c WHERE c.volunteer_id=%s AND c.post_id=%s",
                (int(volunteer_id), int(post_id)),
            )
            r = fetchone(cur)
            return self._to_certificate(r) if r else None

    def volunteer_ids_with_certificate(self, *, post_id: int, volunteer_ids: Iterable[int]) -> set[int]:
        ids = [int(v) for v in volunteer_ids]
        if not ids:
            return set()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT volunteer_id FROM certificates
                WHERE post_id=%s AND volunteer_id IN ({placeholders(len(ids))})
                """,
                (int(post_id), *ids),
            )
            return {int(r["volunteer_id"]) for r in fetchall(cur)}

    def create(
        self,
        *,
        volunteer_id: int,
        post_id: int,
        organization_id: Optional[int],
        title: str,
        description: Optional[str],
        certificate_url: Optional[str],
        issued_date: datetime,
    ) -> int:
        with unique_violation_as_conflict("Certificate already issued for this volunteer and post"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO certificates(
                        volunteer_id, post_id, organization_id, title, description, certificate_url, issued_date
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(volunteer_id), int(post_id), organization_id, title, description, certificate_url, issued_date),
                )
                return int(cur.lastrowid)

    def get_by_id(self, certificate_id: int) -> Optional[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM certificates c WHERE c.certificate_id=%s", (int(certificate_id),))
            r = fetchone(cur)
            return self._to_certificate(r) if r else None

    def list_for_volunteer(self, volunteer_id: int) -> Sequence[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM certificates c WHERE c.volunteer_id=%s ORDER BY c.issued_date DESC",
                (int(volunteer_id),),
            )
            return [self._to_certificate(r) for r in fetchall(cur)]

    def list_for_post_author(self, author_id: int) -> Sequence[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM certificates c
                JOIN posts p ON p.post_id = c.post_id
                WHERE p.author_id=%s
                ORDER BY c.issued_date DESC
                """,
                (int(author_id),),
            )
            return [self._to_certificate(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Certificate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM certificates c ORDER BY c.issued_date DESC")
            return [self._to_certificate(r) for r in fetchall(cur)]
