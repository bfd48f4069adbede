from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from ..applications.model import Application, AttendanceEntry
from ..core.constants import ABSENCE_WINDOW_DAYS
from ..core.enums import AttendanceStatus
from ..penalties.model import Penalty


def absence_window_start(now: datetime) -> datetime:
    """Earliest mark instant still counted as a recent absence (inclusive)."""
    return now - timedelta(days=ABSENCE_WINDOW_DAYS)


def is_recent_absence(status: AttendanceStatus, marked_at: Optional[datetime], now: datetime) -> bool:
    if status != AttendanceStatus.ABSENT or marked_at is None:
        return False
    return absence_window_start(now) <= marked_at <= now


@dataclass(frozen=True)
class AttendanceMarkResult:
    """Outcome of one attendance mark: the updated application and any auto-issued penalty."""

    application: Application
    recent_absences: Optional[int] = None
    penalty: Optional[Penalty] = None


@dataclass
class VolunteerAttendanceStats:
    """Per-volunteer row of the admin attendance overview."""

    volunteer_id: int
    name: str
    email: str
    total_events: int = 0
    present: int = 0
    absent: int = 0
    recent_absences: int = 0
    entries: list[AttendanceEntry] = field(default_factory=list)
