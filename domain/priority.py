"""
Domain: Back-office priority and reason derivation.

Rules are evaluated in strict order; the first match wins:

1. commercial status CANCELLED            -> HIGH,   "Cancelled sale — requires analysis"
2. total_value > 1000                     -> HIGH,   "High value — verification required"
3. commercial status PENDING
     days_since_creation > 3              -> HIGH,   "Pending more than 3 days"
     otherwise                            -> MEDIUM, "Pending — routine follow-up"
4. total_value > 500                      -> MEDIUM, "Medium-high value — standard verification"
5. otherwise                              -> NORMAL, ""

All comparisons are strict: a value of exactly 1000 or 500 does not reach the
tier above it.

Status is read in its coarse back-office form (COMPLETED / PENDING / CANCELLED),
so a full commercial status such as REJECTED is collapsed first.

Malformed input (missing status, missing or invalid value, missing or
unparsable created_at) fails closed to NORMAL with UNCLASSIFIABLE_REASON. Nothing
in here raises on bad sale data.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict

from .sale import Sale
from .sale_age import SaleAge
from .sale_status import BackOfficeStatus, coarse_status
from .time import require_utc_timestamp

HIGH_VALUE_THRESHOLD = Decimal("1000")
MEDIUM_VALUE_THRESHOLD = Decimal("500")

REASON_CANCELLED = "Cancelled sale — requires analysis"
REASON_HIGH_VALUE = "High value — verification required"
REASON_STALE_PENDING = "Pending more than 3 days"
REASON_PENDING = "Pending — routine follow-up"
REASON_MEDIUM_VALUE = "Medium-high value — standard verification"
UNCLASSIFIABLE_REASON = "Unclassifiable: invalid data"


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    NORMAL = "NORMAL"

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self]


# Higher rank sorts first.
PRIORITY_RANK: Dict[Priority, int] = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.NORMAL: 1,
}


@dataclass(frozen=True, slots=True)
class PriorityAssessment:
    priority: Priority
    reason: str
    valid: bool = True


UNCLASSIFIABLE = PriorityAssessment(
    priority=Priority.NORMAL,
    reason=UNCLASSIFIABLE_REASON,
    valid=False,
)


def derive_priority(sale: Sale, *, as_of: datetime) -> PriorityAssessment:
    """
    Compute (priority, reason) for a single sale as of a fixed instant.

    Args:
        sale: Sale to assess
        as_of: UTC instant the whole batch is evaluated against

    Returns:
        PriorityAssessment; `valid` is False when the sale failed closed.

    Raises:
        ValueError: if as_of itself is not a UTC timestamp (caller bug, not bad data)
    """

    require_utc_timestamp("as_of", as_of)

    status = coarse_status(sale.commercial_status)
    total_value = sale.total_value
    age = SaleAge.resolve(sale.created_at, as_of)

    if status is None or total_value is None or age is None:
        return UNCLASSIFIABLE

    if status is BackOfficeStatus.CANCELLED:
        return PriorityAssessment(Priority.HIGH, REASON_CANCELLED)

    if total_value > HIGH_VALUE_THRESHOLD:
        return PriorityAssessment(Priority.HIGH, REASON_HIGH_VALUE)

    if status is BackOfficeStatus.PENDING:
        if age.is_stale():
            return PriorityAssessment(Priority.HIGH, REASON_STALE_PENDING)
        return PriorityAssessment(Priority.MEDIUM, REASON_PENDING)

    if total_value > MEDIUM_VALUE_THRESHOLD:
        return PriorityAssessment(Priority.MEDIUM, REASON_MEDIUM_VALUE)

    return PriorityAssessment(Priority.NORMAL, "")


__all__ = [
    "HIGH_VALUE_THRESHOLD",
    "MEDIUM_VALUE_THRESHOLD",
    "PRIORITY_RANK",
    "Priority",
    "PriorityAssessment",
    "UNCLASSIFIABLE_REASON",
    "derive_priority",
]
