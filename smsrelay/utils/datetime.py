"""
Utilities for standardized datetime handling.
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Returns:
        datetime: Current UTC time
    """
    return datetime.now(timezone.utc)


def format_datetime(dt: Optional[datetime] = None) -> str:
    """
    Format datetime as ISO 8601 string.

    Args:
        dt: Datetime to format (defaults to current UTC time)

    Returns:
        str: ISO 8601 formatted string
    """
    if dt is None:
        dt = utc_now()

    # Ensure datetime is timezone-aware
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.isoformat()


def to_epoch_millis(dt: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def from_epoch_millis(value: float) -> datetime:
    """Convert milliseconds since the Unix epoch to an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def format_duration(seconds: float) -> str:
    """
    Format a remaining duration as hours and minutes.

    Args:
        seconds: Duration in seconds

    Returns:
        str: e.g. '143h 59m', or 'expired' when nothing remains
    """
    total = int(seconds)
    if total <= 0:
        return "expired"
    return f"{total // 3600}h {(total % 3600) // 60}m"
