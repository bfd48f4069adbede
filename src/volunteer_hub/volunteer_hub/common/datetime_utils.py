from __future__ import annotations

from datetime import datetime

from ..core.exceptions import ValidationError


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_iso_datetime(value: str, field_name: str) -> datetime:
    """Parse an ISO-8601 timestamp into a naive local datetime.

    Accepts a trailing ``Z``; aware values are converted to local time so they
    compare against ``now_local()``.
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be an ISO-8601 date", field=field_name)
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 date", field=field_name)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def truncate_to_millis(value: datetime) -> datetime:
    """Drop sub-millisecond precision so the value survives a DATETIME(3) round trip unchanged."""
    return value.replace(microsecond=value.microsecond // 1000 * 1000)
