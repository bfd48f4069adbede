from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PostStatus


@dataclass(frozen=True)
class Post:
    """Domain entity: a volunteer opportunity."""

    post_id: int
    author_id: int
    organization_id: Optional[int]
    title: str
    category: str
    status: PostStatus
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    author_name: Optional[str] = None
