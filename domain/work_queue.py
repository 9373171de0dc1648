"""
Domain: Operational work queues for sale follow-up.

Each sale belongs to at most one queue. Rules are evaluated in strict order
and the first match wins; the order is a business rule, since a sale can
satisfy several loose conditions at once (a delivered portability still
waiting for its PIN belongs in PENDING_PIN, not DELIVERED_PORTABILITY).

1. PENDING_PIN              line status PENDING_PORTABILITY
2. DELIVERED_PORTABILITY    delivered AND product PORTABILITY
3. UNDELIVERED_PORTABILITY  not delivered AND product PORTABILITY AND logistic != INITIAL
4. UNDELIVERED_NEW_LINE     not delivered AND product NEW_LINE AND logistic != INITIAL
5. SCHEDULED                commercial IN_PROGRESS OR logistic ASSIGNED
6. (none)                   unbucketed

"Delivered" means logistic status DELIVERED or SETTLED_WITH_CUSTOMER.

A sale with any status dimension missing is not bucketed here; the classifier
reports it as unclassifiable instead.
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Optional

from .sale import Sale
from .sale_status import CommercialStatus, LineStatus, LogisticStatus, ProductType


class WorkQueue(str, Enum):
    PENDING_PIN = "PENDING_PIN"
    DELIVERED_PORTABILITY = "DELIVERED_PORTABILITY"
    UNDELIVERED_PORTABILITY = "UNDELIVERED_PORTABILITY"
    UNDELIVERED_NEW_LINE = "UNDELIVERED_NEW_LINE"
    SCHEDULED = "SCHEDULED"


DELIVERED_STATUSES: FrozenSet[LogisticStatus] = frozenset(
    {LogisticStatus.DELIVERED, LogisticStatus.SETTLED_WITH_CUSTOMER}
)


def has_complete_statuses(sale: Sale) -> bool:
    """True if every status dimension the queue rules read is present."""

    return None not in (
        sale.commercial_status,
        sale.logistic_status,
        sale.line_status,
        sale.product_type,
    )


def assign_work_queue(sale: Sale) -> Optional[WorkQueue]:
    """
    Resolve the single work queue for a sale, or None if it belongs to none.

    Returns None as well when a status dimension is missing; use
    has_complete_statuses() to tell the two apart.
    """

    if not has_complete_statuses(sale):
        return None

    logistic = sale.logistic_status
    delivered = logistic in DELIVERED_STATUSES
    shipped = logistic is not LogisticStatus.INITIAL

    if sale.line_status is LineStatus.PENDING_PORTABILITY:
        return WorkQueue.PENDING_PIN
    if delivered and sale.product_type is ProductType.PORTABILITY:
        return WorkQueue.DELIVERED_PORTABILITY
    if not delivered and shipped and sale.product_type is ProductType.PORTABILITY:
        return WorkQueue.UNDELIVERED_PORTABILITY
    if not delivered and shipped and sale.product_type is ProductType.NEW_LINE:
        return WorkQueue.UNDELIVERED_NEW_LINE
    if sale.commercial_status is CommercialStatus.IN_PROGRESS or logistic is LogisticStatus.ASSIGNED:
        return WorkQueue.SCHEDULED
    return None


__all__ = [
    "DELIVERED_STATUSES",
    "WorkQueue",
    "assign_work_queue",
    "has_complete_statuses",
]
