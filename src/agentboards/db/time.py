"""Time utilities for database models."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def end_of_utc_day(now: datetime | None = None) -> datetime:
    """Return the last representable instant of the current UTC day."""
    now = (now or utcnow()).astimezone(UTC)
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start + timedelta(days=1) - timedelta(microseconds=1)
