"""
Date Utilities
==============

Common date/time handling utilities for timestamps, conversions, and timezone-aware operations.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Get current time in UTC.

    Returns:
        Current UTC datetime
    """
    return datetime.now(UTC)


def from_unix_seconds(timestamp: int | float) -> datetime:
    """
    Convert Unix timestamp in seconds to datetime (UTC).

    Args:
        timestamp: Unix timestamp in seconds

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.fromtimestamp(timestamp, tz=UTC)


def from_unix_ms(timestamp_ms: int | float) -> datetime:
    """
    Convert Unix timestamp in milliseconds to datetime (UTC).

    Args:
        timestamp_ms: Unix timestamp in milliseconds

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=UTC)


def parse_iso_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 string, accepting a trailing 'Z' for UTC.

    Naive results are assumed UTC.

    Raises:
        ValueError: If value is not a valid ISO-8601 timestamp
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def seconds_since(then: datetime, now: datetime | None = None) -> float:
    """Elapsed seconds between then and now (defaults to current UTC time)."""
    if now is None:
        now = utc_now()
    return (now - then).total_seconds()


def format_time_ago(seconds: float) -> str:
    """
    Human-readable age: "42 seconds", "1 minute", "3 hours", "2 days".

    Negative inputs (clock skew) are clamped to zero.
    """
    seconds = max(int(seconds), 0)
    if seconds < 60:
        return f"{seconds} seconds"
    if seconds < 3600:
        minutes = seconds // 60
        return f"{minutes} {'minute' if minutes == 1 else 'minutes'}"
    if seconds < 86400:
        hours = seconds // 3600
        return f"{hours} {'hour' if hours == 1 else 'hours'}"
    days = seconds // 86400
    return f"{days} {'day' if days == 1 else 'days'}"
