"""Absence-count escalation rules.

Tiers fire on an exact count (3, 5) so a warning is not re-issued on every later
absence; the top tier is open-ended so any count from 7 upwards suspends again.
A count that jumps over a tier skips it.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import (
    RESTRICTION_ABSENCES,
    RESTRICTION_DAYS,
    SUSPENSION_ABSENCES,
    SUSPENSION_DAYS,
    WARNING_ABSENCES,
)
from ..core.enums import PenaltyType


@dataclass(frozen=True)
class PenaltyTemplate:
    """What an escalation tier issues; turned into a Penalty at a given instant."""

    type: PenaltyType
    reason: str
    description: str
    duration: Optional[timedelta] = None

    def expires_at(self, now: datetime) -> Optional[datetime]:
        return now + self.duration if self.duration is not None else None


def decide_escalation(recent_absences: int) -> Optional[PenaltyTemplate]:
    """Map the absence count (including the absence just recorded) to a penalty, if any."""
    if recent_absences == WARNING_ABSENCES:
        return PenaltyTemplate(
            type=PenaltyType.WARNING,
            reason="Multiple Absences",
            description=f"You have been marked absent {recent_absences} times in the last 90 days.",
        )
    if recent_absences == RESTRICTION_ABSENCES:
        return PenaltyTemplate(
            type=PenaltyType.TEMPORARY_RESTRICTION,
            reason="Excessive Absences",
            description=f"You have been marked absent {recent_absences} times. Temporary restrictions applied.",
            duration=timedelta(days=RESTRICTION_DAYS),
        )
    if recent_absences >= SUSPENSION_ABSENCES:
        return PenaltyTemplate(
            type=PenaltyType.SUSPENSION,
            reason="Excessive Absences",
            description=f"You have been marked absent {recent_absences} times. Account suspended.",
            duration=timedelta(days=SUSPENSION_DAYS),
        )
    return None
