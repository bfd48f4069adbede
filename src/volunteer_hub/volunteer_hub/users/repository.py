from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        """Raises ConflictError when the email is already registered."""

        raise NotImplementedError

    def create_organization(self, *, user_id: int, name: str) -> int:
        raise NotImplementedError

    def get_organization_name(self, user_id: int) -> Optional[str]:
        raise NotImplementedError

    def update_profile(
        self,
        *,
        user_id: int,
        name: str,
        bio: Optional[str],
        location: Optional[str],
        skills: Sequence[str],
    ) -> bool:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        """Newest accounts first."""

        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
