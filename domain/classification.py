"""
Domain: Consolidated sale classification.

Single entry point combining priority derivation and work-queue assignment.
Both back-office views (follow-up prioritization and tracking queues) read
from this result, so their rules cannot drift apart.

Contract excerpts implemented here:
- A sale has exactly one classification at any instant; recomputing it from
  the same inputs and the same as_of yields the same result.
- Classification is side-effect free and never raises on bad sale data.
- A sale with a missing status dimension, a missing/invalid value, or a
  missing/unparsable created_at is reported as unclassifiable: priority NORMAL,
  reason UNCLASSIFIABLE_REASON, no queue. It is never dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from .priority import UNCLASSIFIABLE_REASON, Priority, derive_priority
from .sale import Sale
from .sale_status import BackOfficeStatus, coarse_status
from .work_queue import WorkQueue, assign_work_queue, has_complete_statuses


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """
    Derived triage outcome for one sale. Not persisted; recomputed on read.

    status is the coarse back-office status (None when missing), kept so that
    aggregates can count pending/cancelled cases without reclassifying.
    """

    sale_id: str
    priority: Priority
    reason: str
    bucket: Optional[WorkQueue]
    total_value: Optional[Decimal]
    status: Optional[BackOfficeStatus]
    unclassifiable: bool = False


def classify_sale(sale: Sale, *, as_of: datetime) -> ClassificationResult:
    """
    Classify a single sale as of a fixed UTC instant.

    Args:
        sale: Sale to classify (status dimensions may still be raw labels)
        as_of: UTC instant shared by every sale in the same batch

    Returns:
        ClassificationResult
    """

    sale = sale.normalized()
    assessment = derive_priority(sale, as_of=as_of)

    if not assessment.valid or not has_complete_statuses(sale):
        return ClassificationResult(
            sale_id=sale.sale_id,
            priority=Priority.NORMAL,
            reason=UNCLASSIFIABLE_REASON,
            bucket=None,
            total_value=sale.total_value,
            status=coarse_status(sale.commercial_status),
            unclassifiable=True,
        )

    return ClassificationResult(
        sale_id=sale.sale_id,
        priority=assessment.priority,
        reason=assessment.reason,
        bucket=assign_work_queue(sale),
        total_value=sale.total_value,
        status=coarse_status(sale.commercial_status),
    )


__all__ = ["ClassificationResult", "classify_sale"]
