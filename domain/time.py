"""
Domain time utilities (pure).

Centralized timestamp validation and normalization helpers.

Two flavours exist on purpose:
- require_utc_timestamp raises; used by value objects that must reject bad input.
- coerce_utc_timestamp never raises; used on the triage path, where bad data is
  flagged instead of aborting the batch.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional


def require_utc_timestamp(name: str, value: datetime) -> None:
    """
    Enforces that a timestamp is UTC.

    Invariants:
    - Timestamps must be timezone-aware.
    - Timestamps must have UTC offset 0.
    """

    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{name} must be timezone-aware (UTC)")
    if value.utcoffset() != timedelta(0):
        raise ValueError(f"{name} must be a UTC timestamp (offset 0)")


def coerce_utc_timestamp(value: Any) -> Optional[datetime]:
    """
    Best-effort conversion of a raw value into a UTC-aware datetime.

    Accepts datetimes, dates (midnight UTC) and ISO-8601 strings, including a
    trailing 'Z' and the bare 'YYYY-MM-DD' form the sales screens store.
    Naive values are assumed to already be UTC.

    Returns None for anything that cannot be interpreted.
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None or dt.utcoffset() is None:
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        # Offset pushes the instant outside datetime.min..datetime.max
        return None


def utc_now() -> datetime:
    """Current wall-clock time in UTC. Callers snapshot this once per batch."""

    return datetime.now(timezone.utc)
