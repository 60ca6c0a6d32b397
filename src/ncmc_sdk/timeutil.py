"""
UTC Timestamp Helpers
=====================

Small helpers for the millisecond timestamps used throughout the SDK.
Every function works in UTC; local time zones are never consulted.

The codec itself never reads the clock. These helpers exist for callers,
the display module and the command-line tool.

    >>> format_utc(1735689600000)
    '2025-01-01 00:00:00'
    >>> effective_date_from_utc("2023-12-31")
    28399680

Copyright (c) 2026 NCMC SDK Contributors
"""

from datetime import datetime, timezone
import time

from ncmc_sdk.codec.timebase import MS_PER_MINUTE, MS_PER_SECOND


DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_DATE_FORMAT = "%Y-%m-%d"


def now_ms() -> int:
    """Current time in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def format_utc(ms: int, fmt: str = DEFAULT_DATETIME_FORMAT) -> str:
    """Format a millisecond timestamp as UTC text using strftime codes."""
    seconds, millis = divmod(ms, MS_PER_SECOND)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return moment.replace(microsecond=millis * 1000).strftime(fmt)


def parse_utc(text: str, fmt: str = DEFAULT_DATETIME_FORMAT) -> int:
    """
    Parse UTC text into milliseconds since the epoch.

    Raises:
        ValueError: If the text does not match the format
    """
    moment = datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
    return int(moment.timestamp()) * MS_PER_SECOND + moment.microsecond // 1000


def to_minutes(ms: int) -> int:
    """Whole minutes since the epoch, truncated."""
    return ms // MS_PER_MINUTE


def effective_date_from_utc(date_text: str) -> int:
    """
    Card effective date (minutes since epoch) for a YYYY-MM-DD day at 00:00 UTC.

    Raises:
        ValueError: If the text is not a valid date
    """
    return to_minutes(parse_utc(date_text, DEFAULT_DATE_FORMAT))
