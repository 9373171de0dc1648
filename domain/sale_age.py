"""
Domain: Sale age calculation.

Contract excerpts implemented here:
- Sale age is calculated in whole 24-hour days:
  days_since_creation = floor((as_of_utc - created_at_utc) / 24 hours)
- Partial days are truncated, never rounded: a sale created less than 24 hours
  ago is 0 days old.
- Clock skew (created_at in the future relative to as_of) clamps to 0 instead
  of producing a negative age.
- "now" is never read implicitly; as_of is always passed in, and callers
  snapshot it once for a whole batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from .time import coerce_utc_timestamp, require_utc_timestamp

# Pending sales older than this many whole days are escalated.
STALE_PENDING_DAYS = 3


@dataclass(frozen=True, slots=True)
class SaleAge:
    """
    Value object for sale age evaluation.

    All timestamps must be passed explicitly; no implicit 'now' is used.
    """

    created_at_utc: datetime
    as_of_utc: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at_utc", self.created_at_utc)
        require_utc_timestamp("as_of_utc", self.as_of_utc)

    @staticmethod
    def resolve(created_at: Any, as_of_utc: datetime) -> Optional["SaleAge"]:
        """
        Build a SaleAge from a raw created_at value.

        Returns None when created_at cannot be interpreted as a timestamp.
        """

        created_at_utc = coerce_utc_timestamp(created_at)
        if created_at_utc is None:
            return None
        return SaleAge(created_at_utc=created_at_utc, as_of_utc=as_of_utc)

    def days_since_creation(self) -> int:
        """
        Compute sale age in whole days:

        days_since_creation = max(0, floor((as_of_utc - created_at_utc) / 24 hours))
        """

        if self.as_of_utc <= self.created_at_utc:
            return 0

        delta = self.as_of_utc - self.created_at_utc
        return int(delta // timedelta(days=1))

    def is_stale(self) -> bool:
        """True once the sale is strictly older than STALE_PENDING_DAYS whole days."""

        return self.days_since_creation() > STALE_PENDING_DAYS


__all__ = ["STALE_PENDING_DAYS", "SaleAge"]
