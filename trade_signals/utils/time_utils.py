"""
Time helpers for exchange requests and candle timestamps.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def epoch_millis() -> str:
    """Current Unix time in milliseconds, as the string the exchange signs."""
    return str(int(time.time() * 1000))


def from_epoch(value: int | float | str) -> datetime:
    """Convert a Unix timestamp (seconds or milliseconds) to an aware datetime.

    Values above 10^11 are treated as milliseconds; candle feeds mix both.
    """
    value = float(value)
    seconds = value / 1000.0 if value > 1e11 else value
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
