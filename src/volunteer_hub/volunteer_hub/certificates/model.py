from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Certificate:
    """Issued record of participation; at most one per (volunteer, post)."""

    certificate_id: int
    volunteer_id: int
    post_id: int
    organization_id: Optional[int]
    title: str
    issued_date: datetime
    description: Optional[str] = None
    certificate_url: Optional[str] = None
    verified: bool = True


@dataclass(frozen=True)
class BulkIssueResult:
    created: int = 0
    skipped_existing: int = 0
    skipped_penalty: int = 0
    # Eligibility is the selection query itself, so nothing lands here today.
    skipped_not_eligible: int = 0
