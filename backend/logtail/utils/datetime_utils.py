"""
Datetime utilities for log line rendering
Converts Unix timestamps from the log table into timezone-aware datetimes
"""
import re
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo

_DECIMAL = re.compile(r"[+-]?[0-9]+")


def parse_unix_timestamp(value: Any) -> Optional[int]:
    """
    Parse a Unix timestamp column value

    Returns:
        int: Seconds since the epoch, or None when the value is not a base-10 integer

    Example:
        >>> parse_unix_timestamp("1700000000")
        1700000000
        >>> parse_unix_timestamp("yesterday") is None
        True
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="replace")
    if not isinstance(value, str):
        return None
    if not _DECIMAL.fullmatch(value):
        return None
    return int(value)


def from_unix_timestamp(seconds: int, tz_name: Optional[str] = None) -> datetime:
    """
    Convert a Unix timestamp to an aware datetime

    Args:
        seconds: Seconds since the epoch
        tz_name: IANA timezone name; the local timezone when None

    Returns:
        datetime: Aware datetime in the requested timezone
    """
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    if tz_name:
        return moment.astimezone(ZoneInfo(tz_name))
    return moment.astimezone()
