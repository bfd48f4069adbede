from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PostStatus
from .model import Post


class PostRepository(Protocol):
    def get_by_id(self, post_id: int) -> Optional[Post]:
        raise NotImplementedError

    def get_organization_id_for_user(self, user_id: int) -> Optional[int]:
        raise NotImplementedError

    def create_post(
        self,
        *,
        author_id: int,
        organization_id: Optional[int],
        title: str,
        category: str,
        status: PostStatus,
        location: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        description: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_post(
        self,
        *,
        post_id: int,
        title: str,
        category: str,
        status: PostStatus,
        location: Optional[str],
        start_date: Optional[datetime],
        end_date: Optional[datetime],
        description: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def set_status(self, *, post_id: int, status: PostStatus) -> bool:
        raise NotImplementedError

    def delete_post(self, post_id: int) -> bool:
        """Applications and certificates of the post go with it."""

        raise NotImplementedError

    def list_posts(
        self,
        *,
        status: PostStatus,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[Post]:
        """Posts in ``status``, newest first; ``search`` matches title or description, case-insensitive."""

        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_by_status(self, status: PostStatus) -> int:
        raise NotImplementedError
