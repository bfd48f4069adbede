from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApplicationStatus, AttendanceStatus
from .model import Application, AttendanceEntry


class ApplicationRepository(Protocol):
    def get_by_id(self, application_id: int) -> Optional[Application]:
        raise NotImplementedError

    def get_for_volunteer_and_post(self, *, volunteer_id: int, post_id: int) -> Optional[Application]:
        raise NotImplementedError

    def create(self, *, volunteer_id: int, post_id: int, message: Optional[str], created_at: datetime) -> int:
        """Raises ConflictError when the (volunteer, post) pair already exists."""

        raise NotImplementedError

    def delete(self, application_id: int) -> bool:
        raise NotImplementedError

    def update_status(self, *, application_id: int, status: ApplicationStatus) -> bool:
        raise NotImplementedError

    def update_attendance(
        self,
        *,
        application_id: int,
        attendance_status: AttendanceStatus,
        marked_at: Optional[datetime],
    ) -> bool:
        raise NotImplementedError

    def count_absences_between(self, *, volunteer_id: int, start: datetime, end: datetime) -> int:
        """ABSENT applications with ``start <= attendance_marked_at <= end``."""

        raise NotImplementedError

    def list_for_post(self, post_id: int) -> Sequence[Application]:
        raise NotImplementedError

    def list_eligible_volunteer_ids(self, post_id: int) -> Sequence[int]:
        """Volunteers with an APPROVED application marked PRESENT for the post."""

        raise NotImplementedError

    def list_marked_entries(self) -> Sequence[AttendanceEntry]:
        """All PRESENT/ABSENT applications, newest mark first."""

        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
