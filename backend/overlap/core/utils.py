"""
Utility helpers
"""

from typing import Optional
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def as_utc(timestamp: datetime) -> datetime:
    """Treat naive timestamps (SQLite drops tzinfo) as UTC"""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def format_timestamp_with_timezone(timestamp: Optional[datetime]) -> str:
    """Format a timestamp as ISO-8601 UTC with a 'Z' suffix"""
    if not timestamp:
        return ""
    return as_utc(timestamp).replace(tzinfo=None).isoformat() + 'Z'
