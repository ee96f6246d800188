"""Timestamp and duration utilities.

Simple helpers to keep time handling consistent across the scanner.
"""

from datetime import datetime, timezone
from typing import Optional


def now_utc() -> datetime:
    """Return current UTC time with timezone info.

    Certificate expiry math is done in UTC so day counts don't drift with local time.
    """
    return datetime.now(timezone.utc)


def duration_ms(start: datetime, end: Optional[datetime] = None) -> float:
    """Calculate duration in milliseconds between two timestamps.

    If end is None, uses current time.
    """
    if end is None:
        end = now_utc()
    delta = end - start
    return delta.total_seconds() * 1000
