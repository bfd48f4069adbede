from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ApplicationStatus, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_violation_as_conflict
from .model import Application, AttendanceEntry
from .repository import ApplicationRepository

_COLUMNS = """
    application_id, volunteer_id, post_id, status, attendance_status,
    attendance_marked_at, message, created_at
"""


class MySQLApplicationRepository(ApplicationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_application(r: dict) -> Application:
        return Application(
            application_id=int(r["application_id"]),
            volunteer_id=int(r["volunteer_id"]),
            post_id=int(r["post_id"]),
            status=ApplicationStatus(r["status"]),
            attendance_status=AttendanceStatus(r["attendance_status"]),
            attendance_marked_at=r.get("attendance_marked_at"),
            message=r.get("message"),
            created_at=r.get("created_at"),
        )

    def get_by_id(self, application_id: int) -> Optional[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM applications WHERE application_id=%s", (int(application_id),))
            r = fetchone(cur)
            return self._to_application(r) if r else None

    def get_for_volunteer_and_post(self, *, volunteer_id: int, post_id: int) -> Optional[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM applications WHERE volunteer_id=%s AND post_id=%s",
                (int(volunteer_id), int(post_id)),
            )
            r = fetchone(cur)
            return self._to_application(r) if r else None

    def create(self, *, volunteer_id: int, post_id: int, message: Optional[str], created_at: datetime) -> int:
        with unique_violation_as_conflict("Already applied to this post"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO applications(volunteer_id, post_id, message, status, attendance_status, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(volunteer_id),
                        int(post_id),
                        message,
                        ApplicationStatus.PENDING.value,
                        AttendanceStatus.NOT_MARKED.value,
                        created_at,
                    ),
                )
                return int(cur.lastrowid)

    def delete(self, application_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM applications WHERE application_id=%s", (int(application_id),))
            return cur.rowcount > 0

    def update_status(self, *, application_id: int, status: ApplicationStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE applications SET status=%s WHERE application_id=%s",
                (status.value, int(application_id)),
            )
            return cur.rowcount > 0

    def update_attendance(
        self,
        *,
        application_id: int,
        attendance_status: AttendanceStatus,
        marked_at: Optional[datetime],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE applications
                SET attendance_status=%s, attendance_marked_at=%s
                WHERE application_id=%s
                """,
                (attendance_status.value, marked_at, int(application_id)),
            )
            # rowcount is 0 when the values did not change; treat existence as success.
            return cur.rowcount > 0 or self._exists(cur, application_id)

    @staticmethod
    def _exists(cur, application_id: int) -> bool:
        cur.execute("SELECT 1 AS found FROM applications WHERE application_id=%s", (int(application_id),))
        return fetchone(cur) is not None

    def count_absences_between(self, *, volunteer_id: int, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS absences
                FROM applications
                WHERE volunteer_id=%s
                  AND attendance_status=%s
                  AND attendance_marked_at >= %s
                  AND attendance_marked_at <= %s
                """,
                (int(volunteer_id), AttendanceStatus.ABSENT.value, start, end),
            )
            r = fetchone(cur)
            return int(r["absences"]) if r else 0

    def list_for_post(self, post_id: int) -> Sequence[Application]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM applications WHERE post_id=%s ORDER BY created_at DESC",
                (int(post_id),),
            )
            return [self._to_application(r) for r in fetchall(cur)]

    def list_eligible_volunteer_ids(self, post_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT volunteer_id
                FROM applications
                WHERE post_id=%s AND status=%s AND attendance_status=%s
                """,
                (int(post_id), ApplicationStatus.APPROVED.value, AttendanceStatus.PRESENT.value),
            )
            return [int(r["volunteer_id"]) for r in fetchall(cur)]

    def list_marked_entries(self) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.application_id, a.volunteer_id, u.name AS volunteer_name, u.email AS volunteer_email,
                       p.post_id, p.title AS post_title, p.category AS post_category, p.start_date AS post_start_date,
                       o.name AS organization_name,
                       a.attendance_status, a.attendance_marked_at
                FROM applications a
                JOIN users u ON u.user_id = a.volunteer_id
                JOIN posts p ON p.post_id = a.post_id
                LEFT JOIN organizations o ON o.organization_id = p.organization_id
                WHERE a.attendance_status IN (%s, %s)
                ORDER BY a.attendance_marked_at DESC
                """,
                (AttendanceStatus.PRESENT.value, AttendanceStatus.ABSENT.value),
            )
            return [
                AttendanceEntry(
                    application_id=int(r["application_id"]),
                    volunteer_id=int(r["volunteer_id"]),
                    volunteer_name=r["volunteer_name"],
                    volunteer_email=r["volunteer_email"],
                    post_id=int(r["post_id"]),
                    post_title=r["post_title"],
                    post_category=r["post_category"],
                    post_start_date=r.get("post_start_date"),
                    organization_name=r.get("organization_name"),
                    attendance_status=AttendanceStatus(r["attendance_status"]),
                    attendance_marked_at=r.get("attendance_marked_at"),
                )
                for r in fetchall(cur)
            ]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM applications")
            return int(fetchone(cur)["n"])
