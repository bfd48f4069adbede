from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ApplicationStatus, AttendanceStatus


@dataclass(frozen=True)
class Application:
    """Domain entity: a volunteer's application to a post.

    Invariant: ``attendance_marked_at`` is set iff ``attendance_status`` is not NOT_MARKED.
    """

    application_id: int
    volunteer_id: int
    post_id: int
    status: ApplicationStatus
    attendance_status: AttendanceStatus = AttendanceStatus.NOT_MARKED
    attendance_marked_at: Optional[datetime] = None
    message: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceEntry:
    """Read-model for the admin attendance overview (joined with user/post)."""

    application_id: int
    volunteer_id: int
    volunteer_name: str
    volunteer_email: str
    post_id: int
    post_title: str
    post_category: str
    post_start_date: Optional[datetime]
    organization_name: Optional[str]
    attendance_status: AttendanceStatus
    attendance_marked_at: Optional[datetime]
