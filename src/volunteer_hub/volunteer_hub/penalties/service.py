from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_datetime
from ..common.validators import optional_str, parse_enum, require_int, require_non_empty
from ..core.actor import Actor
from ..core.enums import PenaltyStatus, PenaltyType, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.repository import UserRepository
from .escalation import decide_escalation
from .model import Penalty, is_effective
from .repository import PenaltyRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserPenalties:
    """A user's penalties split into the currently effective subset and full history."""

    active: list[Penalty]
    all: list[Penalty]


class PenaltyEscalator:
    """Issues penalties: automatically from absence counts, or on admin request."""

    def __init__(self, penalties: PenaltyRepository, users: UserRepository):
        self._penalties = penalties
        self._users = users

    # -------- automatic escalation --------
    def evaluate(self, volunteer_id: int, recent_absences: int, *, now: datetime | None = None) -> Optional[Penalty]:
        """Create the tier penalty for ``recent_absences``, if that count hits a tier."""
        now = now or now_local()
        template = decide_escalation(int(recent_absences))
        if template is None:
            return None

        penalty_id = self._penalties.create(
            user_id=int(volunteer_id),
            type=template.type,
            reason=template.reason,
            description=template.description,
            expires_at=template.expires_at(now),
            created_at=now,
        )
        logger.info(
            "auto-issued %s penalty %s to volunteer %s after %s recent absences",
            template.type.value,
            penalty_id,
            volunteer_id,
            recent_absences,
        )
        return self._penalties.get_by_id(penalty_id)

    # -------- admin actions --------
    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Forbidden")

    def _get(self, penalty_id: int) -> Penalty:
        penalty = self._penalties.get_by_id(int(penalty_id))
        if not penalty:
            raise NotFoundError("Penalty not found")
        return penalty

    def create_penalty(
        self,
        actor: Actor,
        *,
        user_id: Any,
        type: Any,
        reason: Any,
        description: Any = None,
        expires_at: Any = None,
        now: datetime | None = None,
    ) -> Penalty:
        """Admin-issued penalty; allowed regardless of the user's existing penalties."""
        self._require_admin(actor)
        now = now or now_local()

        user_id = require_int(user_id, "userId")
        penalty_type = parse_enum(PenaltyType, type, "type")
        reason = require_non_empty(reason, "reason")
        expires = parse_iso_datetime(expires_at, "expiresAt") if expires_at else None

        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")

        penalty_id = self._penalties.create(
            user_id=user_id,
            type=penalty_type,
            reason=reason,
            description=optional_str(description),
            expires_at=expires,
            created_at=now,
            issued_by=actor.user_id,
        )
        logger.info("admin %s issued %s penalty %s to user %s", actor.user_id, penalty_type.value, penalty_id, user_id)
        return self._get(penalty_id)

    def resolve_penalty(self, actor: Actor, penalty_id: int, *, now: datetime | None = None) -> Penalty:
        self._require_admin(actor)
        now = now or now_local()
        penalty = self._get(penalty_id)
        self._penalties.update_status(penalty_id=penalty.penalty_id, status=PenaltyStatus.RESOLVED, resolved_at=now)
        logger.info("admin %s resolved penalty %s", actor.user_id, penalty.penalty_id)
        return self._get(penalty_id)

    def update_status(self, actor: Actor, penalty_id: int, status: Any, *, now: datetime | None = None) -> Penalty:
        """Admin status change; RESOLVED goes through ``resolve_penalty`` so resolved_at is set."""
        self._require_admin(actor)
        if status is None:
            return self._get(penalty_id)

        new_status = parse_enum(PenaltyStatus, status, "status")
        if new_status == PenaltyStatus.RESOLVED:
            return self.resolve_penalty(actor, penalty_id, now=now)

        penalty = self._get(penalty_id)
        self._penalties.update_status(penalty_id=penalty.penalty_id, status=new_status)
        logger.info("admin %s set penalty %s to %s", actor.user_id, penalty.penalty_id, new_status.value)
        return self._get(penalty_id)

    def delete_penalty(self, actor: Actor, penalty_id: int) -> None:
        self._require_admin(actor)
        penalty = self._get(penalty_id)
        self._penalties.delete(penalty.penalty_id)
        logger.info("admin %s deleted penalty %s", actor.user_id, penalty.penalty_id)

    # -------- queries --------
    def list_all(self, actor: Actor) -> Sequence[Penalty]:
        self._require_admin(actor)
        return self._penalties.list_all()

    def list_for_user(self, user_id: int, *, now: datetime | None = None) -> UserPenalties:
        now = now or now_local()
        penalties = list(self._penalties.list_for_user(int(user_id)))
        return UserPenalties(active=[p for p in penalties if is_effective(p, now)], all=penalties)
