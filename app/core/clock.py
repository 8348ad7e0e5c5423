"""Wall-clock access for presence and dashboard formatting."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime. Patched in tests."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
