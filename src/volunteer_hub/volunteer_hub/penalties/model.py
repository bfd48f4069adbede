from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PenaltyStatus, PenaltyType


@dataclass(frozen=True)
class Penalty:
    """Domain entity: an enforcement record against a user.

    ``issued_by`` is None for penalties issued automatically by escalation.
    ``expires_at`` None means the penalty lasts until an admin resolves it.
    """

    penalty_id: int
    user_id: int
    type: PenaltyType
    status: PenaltyStatus
    reason: str
    created_at: datetime
    description: Optional[str] = None
    expires_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    issued_by: Optional[int] = None


def is_effective(penalty: Penalty, now: datetime) -> bool:
    """Whether the penalty is in force at ``now``.

    Expiry is derived here on every read; nothing rewrites the stored status to EXPIRED.
    """
    if penalty.status != PenaltyStatus.ACTIVE:
        return False
    return penalty.expires_at is None or penalty.expires_at > now
