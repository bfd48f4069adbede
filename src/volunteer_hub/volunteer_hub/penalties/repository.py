from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import PenaltyStatus, PenaltyType
from .model import Penalty


class PenaltyRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        type: PenaltyType,
        reason: str,
        created_at: datetime,
        description: Optional[str] = None,
        expires_at: Optional[datetime] = None,
        issued_by: Optional[int] = None,
    ) -> int:
        """Insert an ACTIVE penalty and return its id."""

        raise NotImplementedError

    def get_by_id(self, penalty_id: int) -> Optional[Penalty]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Penalty]:
        """All penalties of a user, newest first."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Penalty]:
        raise NotImplementedError

    def list_active_for_users(self, user_ids: Iterable[int]) -> Sequence[Penalty]:
        """Penalties stored as ACTIVE; expiry is left to ``is_effective``."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        penalty_id: int,
        status: PenaltyStatus,
        resolved_at: Optional[datetime] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, penalty_id: int) -> bool:
        raise NotImplementedError
