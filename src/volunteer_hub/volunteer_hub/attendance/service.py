from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..applications.repository import ApplicationRepository
from ..common.datetime_utils import now_local, truncate_to_millis
from ..common.validators import parse_enum
from ..core.actor import Actor
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..database.locks import VolunteerLock, no_lock
from ..penalties.service import PenaltyEscalator
from ..posts.repository import PostRepository
from .model import AttendanceMarkResult, VolunteerAttendanceStats, absence_window_start, is_recent_absence

logger = logging.getLogger(__name__)


class AttendanceTracker:
    """Records attendance marks and escalates penalties on absences, in the same call."""

    def __init__(
        self,
        applications: ApplicationRepository,
        posts: PostRepository,
        escalator: PenaltyEscalator,
        *,
        volunteer_lock: VolunteerLock = no_lock,
    ):
        self._applications = applications
        self._posts = posts
        self._escalator = escalator
        self._volunteer_lock = volunteer_lock

    def recent_absences(self, volunteer_id: int, *, now: datetime | None = None) -> int:
        now = now or now_local()
        return self._applications.count_absences_between(
            volunteer_id=int(volunteer_id),
            start=absence_window_start(now),
            end=now,
        )

    def mark_attendance(
        self,
        actor: Actor,
        application_id: int,
        new_status: Any,
        *,
        now: datetime | None = None,
    ) -> AttendanceMarkResult:
        """Set the attendance mark; only the post author may do so.

        Marking ABSENT re-counts the volunteer's recent absences and may issue a penalty.
        PRESENT/NOT_MARKED never retract earlier penalties.
        """
        # The mark is stored at millisecond precision and must fall inside the window counted below.
        now = truncate_to_millis(now or now_local())
        status = parse_enum(AttendanceStatus, new_status, "attendanceStatus")

        application = self._applications.get_by_id(int(application_id))
        if not application:
            raise NotFoundError("Application not found")

        post = self._posts.get_by_id(application.post_id)
        if not post or post.author_id != actor.user_id:
            logger.warning("user %s may not mark attendance on application %s", actor.user_id, application_id)
            raise AuthorizationError("Forbidden")

        marked_at = now if status != AttendanceStatus.NOT_MARKED else None

        with self._volunteer_lock(application.volunteer_id):
            self._applications.update_attendance(
                application_id=application.application_id,
                attendance_status=status,
                marked_at=marked_at,
            )
            logger.info("application %s marked %s by user %s", application.application_id, status.value, actor.user_id)

            recent = None
            penalty = None
            if status == AttendanceStatus.ABSENT:
                recent = self.recent_absences(application.volunteer_id, now=now)
                penalty = self._escalator.evaluate(application.volunteer_id, recent, now=now)

        updated = self._applications.get_by_id(application.application_id)
        if not updated:
            raise NotFoundError("Application not found")
        return AttendanceMarkResult(application=updated, recent_absences=recent, penalty=penalty)


class AttendanceReportService:
    """Admin overview: attendance grouped by volunteer, most recent absentees first."""

    def __init__(self, applications: ApplicationRepository):
        self._applications = applications

    def build_overview(self, actor: Actor, *, now: datetime | None = None) -> list[VolunteerAttendanceStats]:
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Forbidden")
        now = now or now_local()

        stats_map: dict[int, VolunteerAttendanceStats] = {}
        for entry in self._applications.list_marked_entries():
            s = stats_map.get(entry.volunteer_id)
            if not s:
                s = VolunteerAttendanceStats(
                    volunteer_id=entry.volunteer_id,
                    name=entry.volunteer_name,
                    email=entry.volunteer_email,
                )
                stats_map[entry.volunteer_id] = s

            s.total_events += 1
            s.entries.append(entry)
            if entry.attendance_status == AttendanceStatus.PRESENT:
                s.present += 1
            elif entry.attendance_status == AttendanceStatus.ABSENT:
                s.absent += 1
                if is_recent_absence(entry.attendance_status, entry.attendance_marked_at, now):
                    s.recent_absences += 1

        return sorted(stats_map.values(), key=lambda s: s.recent_absences, reverse=True)
