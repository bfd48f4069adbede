from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    VOLUNTEER = "VOLUNTEER"
    ORGANIZATION = "ORGANIZATION"
    ADMIN = "ADMIN"


class PostStatus(str, Enum):
    """Post lifecycle: organization posts wait for admin approval.

    FLAGGED posts are hidden from the public listing until an admin moderates them.
    """

    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"
    FLAGGED = "FLAGGED"


class ApplicationStatus(str, Enum):
    """Organization decision on an application."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AttendanceStatus(str, Enum):
    """Attendance mark stored on an application."""

    NOT_MARKED = "NOT_MARKED"
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"


class PenaltyType(str, Enum):
    WARNING = "WARNING"
    TEMPORARY_RESTRICTION = "TEMPORARY_RESTRICTION"
    SUSPENSION = "SUSPENSION"


class PenaltyStatus(str, Enum):
    """Stored penalty status.

    EXPIRED is only ever set by an admin; time-based expiry is derived on read.
    """

    ACTIVE = "ACTIVE"
    RESOLVED = "RESOLVED"
    EXPIRED = "EXPIRED"


class GateAction(str, Enum):
    """Actions guarded by the eligibility gate."""

    APPLY_TO_POST = "APPLY_TO_POST"
    RECEIVE_CERTIFICATE = "RECEIVE_CERTIFICATE"
