from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .enums import Role


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as supplied by the session layer."""

    user_id: int
    role: Role
    name: Optional[str] = None
