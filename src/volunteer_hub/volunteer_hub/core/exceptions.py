from __future__ import annotations

from datetime import datetime
from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class AuthenticationError(DomainError):
    """Raised when there is no authenticated user or credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised on duplicate applications/certificates/accounts."""


class EligibilityDenied(DomainError):
    """Raised when an effective penalty blocks the requested action."""

    status_code = 403

    def __init__(self, message: str, *, penalty_type: Any, expires_at: Optional[datetime] = None):
        details: dict[str, Any] = {"penaltyType": getattr(penalty_type, "value", penalty_type)}
        if expires_at is not None:
            details["expiresAt"] = expires_at.isoformat()
        super().__init__(message, details=details)
        self.penalty_type = penalty_type
        self.expires_at = expires_at
