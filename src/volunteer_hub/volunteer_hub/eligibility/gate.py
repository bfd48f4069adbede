"""Eligibility gate: may a volunteer act now, given their effective penalties?

Penalty state is read from the repository on every check; nothing is cached.
SUSPENSION blocks both applying and receiving certificates. TEMPORARY_RESTRICTION
only blocks applying. WARNING never blocks.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..applications.model import Application
from ..certificates.repository import CertificateRepository
from ..common.datetime_utils import now_local
from ..core.enums import ApplicationStatus, AttendanceStatus, GateAction, PenaltyType
from ..core.exceptions import ConflictError, EligibilityDenied, ValidationError
from ..penalties.model import Penalty, is_effective
from ..penalties.repository import PenaltyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GateDecision:
    action: GateAction
    allowed: bool
    reason: Optional[str] = None
    blocking_penalty: Optional[Penalty] = None

    def raise_if_denied(self) -> None:
        if self.allowed:
            return
        penalty = self.blocking_penalty
        raise EligibilityDenied(
            self.reason or "Not allowed",
            penalty_type=penalty.type if penalty else None,
            expires_at=penalty.expires_at if penalty else None,
        )


def _first_of_type(penalties: Iterable[Penalty], penalty_type: PenaltyType) -> Optional[Penalty]:
    # Of several penalties of one type, report the one that lasts longest (None = indefinite).
    matching = [p for p in penalties if p.type == penalty_type]
    if not matching:
        return None
    return max(matching, key=lambda p: (p.expires_at is None, p.expires_at or datetime.min))


def decide_apply(effective: Sequence[Penalty]) -> GateDecision:
    """Apply-to-post decision over already-effective penalties; suspension wins over restriction."""
    suspension = _first_of_type(effective, PenaltyType.SUSPENSION)
    if suspension:
        if suspension.expires_at:
            blocked = f"You are blocked from applying to posts until {suspension.expires_at.strftime('%Y-%m-%d')}."
        else:
            blocked = "You are indefinitely blocked from applying to posts."
        return GateDecision(
            action=GateAction.APPLY_TO_POST,
            allowed=False,
            reason=f"Your account is suspended (SUSPENSION). {blocked}",
            blocking_penalty=suspension,
        )

    restriction = _first_of_type(effective, PenaltyType.TEMPORARY_RESTRICTION)
    if restriction:
        if restriction.expires_at:
            until = f" until {restriction.expires_at.strftime('%Y-%m-%d')}"
        else:
            until = ""
        return GateDecision(
            action=GateAction.APPLY_TO_POST,
            allowed=False,
            reason=(
                "Your account has a temporary restriction (TEMPORARY_RESTRICTION). "
                f"You cannot apply to posts{until}."
            ),
            blocking_penalty=restriction,
        )

    return GateDecision(action=GateAction.APPLY_TO_POST, allowed=True)


def decide_certificate(effective: Sequence[Penalty]) -> GateDecision:
    """Penalty part of the certificate decision: only a suspension blocks."""
    suspension = _first_of_type(effective, PenaltyType.SUSPENSION)
    if suspension:
        return GateDecision(
            action=GateAction.RECEIVE_CERTIFICATE,
            allowed=False,
            reason="Cannot issue certificate to suspended user",
            blocking_penalty=suspension,
        )
    return GateDecision(action=GateAction.RECEIVE_CERTIFICATE, allowed=True)


class EligibilityGate:
    def __init__(self, penalties: PenaltyRepository, certificates: CertificateRepository):
        self._penalties = penalties
        self._certificates = certificates

    def effective_penalties(self, volunteer_id: int, *, now: datetime | None = None) -> list[Penalty]:
        now = now or now_local()
        return [p for p in self._penalties.list_active_for_users([int(volunteer_id)]) if is_effective(p, now)]

    def check_apply(self, volunteer_id: int, *, now: datetime | None = None) -> GateDecision:
        return decide_apply(self.effective_penalties(volunteer_id, now=now))

    def ensure_can_apply(self, volunteer_id: int, *, now: datetime | None = None) -> None:
        decision = self.check_apply(volunteer_id, now=now)
        if not decision.allowed:
            logger.warning("volunteer %s blocked from applying: %s", volunteer_id, decision.blocking_penalty.type.value)
        decision.raise_if_denied()

    def ensure_can_receive_certificate(
        self,
        application: Optional[Application],
        *,
        now: datetime | None = None,
    ) -> None:
        """Raise unless a certificate may be issued for this application right now."""
        if application is None or application.status != ApplicationStatus.APPROVED:
            raise ValidationError("Volunteer must have an approved application")
        if application.attendance_status != AttendanceStatus.PRESENT:
            raise ValidationError("Certificate can only be issued to volunteers who attended the event")

        decision = decide_certificate(self.effective_penalties(application.volunteer_id, now=now))
        if not decision.allowed:
            logger.warning("certificate refused for suspended volunteer %s", application.volunteer_id)
        decision.raise_if_denied()

        existing = self._certificates.get_for_volunteer_and_post(
            volunteer_id=application.volunteer_id,
            post_id=application.post_id,
        )
        if existing:
            raise ConflictError("Certificate already issued for this volunteer and post")

    def suspended_among(self, volunteer_ids: Iterable[int], *, now: datetime | None = None) -> set[int]:
        now = now or now_local()
        return {
            p.user_id
            for p in self._penalties.list_active_for_users(volunteer_ids)
            if p.type == PenaltyType.SUSPENSION and is_effective(p, now)
        }
