"""
Timestamp utilities for consistent time handling across the system.
"""

import time
from datetime import datetime, timezone
from typing import Optional


def now_iso(timestamp: Optional[float] = None) -> str:
    """Format a timestamp as ISO-8601 UTC with millisecond precision.

    Args:
        timestamp: Unix timestamp in seconds (optional, uses current time if None)

    Returns:
        String such as ``2025-01-31T08:15:02.481Z``
    """
    if timestamp is None:
        timestamp = time.time()
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f'{moment.microsecond // 1000:03d}Z'


def parse_iso(value: str) -> datetime:
    """Parse a timestamp written by ``now_iso`` (or any ISO-8601 string) into an aware datetime.

    Raises:
        ValueError: If the value is not a valid ISO-8601 timestamp
    """
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_epoch_ms(timestamp: Optional[float] = None) -> int:
    """Convert timestamp to integer epoch milliseconds."""
    if timestamp is None:
        timestamp = time.time()
    return int(timestamp * 1000)


def age_in_days(mtime: float, now: Optional[float] = None) -> float:
    """Age of a file modification time in fractional days."""
    if now is None:
        now = time.time()
    return (now - mtime) / 86400.0
