"""
Common date/time helpers.

Storage: timestamps are stored in UTC. SQLite hands them back naive, so
anything compared against a stored value goes through ``as_utc`` first.
"""

from datetime import datetime, timezone


def as_utc(dt: datetime) -> datetime:
    """
    Convert dt to tz-aware UTC.
    If dt is naive, we treat it as UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    """Current UTC datetime."""
    return datetime.now(timezone.utc)
