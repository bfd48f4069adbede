from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ModerationAction(str, Enum):
    APPROVE = "approve"
    DELETE = "delete"


@dataclass(frozen=True)
class PlatformStats:
    """Admin dashboard counters."""

    total_users: int
    total_posts: int
    total_applications: int
    flagged_posts: int
