"""
Domain: Aggregate triage metrics.

Summary figures behind the back-office badges, computed in a single pass over
already-classified sales (no sale is classified twice).

- avg_value = total_value / total_cases, 0 when there are no cases.
- urgency_rate = high_priority_count / total_cases * 100, 0 when there are no cases.
- Sales without a valid total_value contribute 0 to total_value but still
  count as cases.
- queue_counts partitions the classifiable sales only:
  sum(queue_counts) + unclassifiable_count == total_cases.

No figure is ever NaN or infinite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, Overflow
from typing import Dict, Iterable, Optional

from .classification import ClassificationResult
from .priority import Priority
from .sale_status import BackOfficeStatus
from .work_queue import WorkQueue


@dataclass(frozen=True, slots=True)
class AggregateMetrics:
    total_cases: int = 0
    high_priority_count: int = 0
    medium_priority_count: int = 0
    pending_count: int = 0
    cancelled_count: int = 0
    unclassifiable_count: int = 0
    total_value: Decimal = Decimal("0")
    avg_value: Decimal = Decimal("0")
    urgency_rate: float = 0.0
    # Keyed by queue; None holds the unbucketed count.
    queue_counts: Dict[Optional[WorkQueue], int] = field(default_factory=dict)

    def queue_count(self, queue: Optional[WorkQueue]) -> int:
        return self.queue_counts.get(queue, 0)


class MetricsAccumulator:
    """
    Running totals for one aggregate computation.

    Lets the triage service fold metrics into the same loop that classifies
    sales, keeping the whole batch a single pass.
    """

    def __init__(self) -> None:
        self.total_cases = 0
        self.high_priority_count = 0
        self.medium_priority_count = 0
        self.pending_count = 0
        self.cancelled_count = 0
        self.unclassifiable_count = 0
        self.total_value = Decimal("0")
        self.queue_counts: Dict[Optional[WorkQueue], int] = {queue: 0 for queue in WorkQueue}
        self.queue_counts[None] = 0

    def add(self, result: ClassificationResult) -> None:
        self.total_cases += 1

        if result.priority is Priority.HIGH:
            self.high_priority_count += 1
        elif result.priority is Priority.MEDIUM:
            self.medium_priority_count += 1

        if result.status is BackOfficeStatus.PENDING:
            self.pending_count += 1
        elif result.status is BackOfficeStatus.CANCELLED:
            self.cancelled_count += 1

        if result.unclassifiable:
            self.unclassifiable_count += 1

        if result.total_value is not None:
            try:
                self.total_value += result.total_value
            except (Overflow, InvalidOperation):
                # Sum past the decimal context range; the value is left out.
                pass

        # Unclassifiable sales are reported on their own, outside the queue partition.
        if not result.unclassifiable:
            self.queue_counts[result.bucket] += 1

    def result(self) -> AggregateMetrics:
        if self.total_cases == 0:
            avg_value = Decimal("0")
            urgency_rate = 0.0
        else:
            avg_value = self.total_value / self.total_cases
            urgency_rate = self.high_priority_count / self.total_cases * 100

        return AggregateMetrics(
            total_cases=self.total_cases,
            high_priority_count=self.high_priority_count,
            medium_priority_count=self.medium_priority_count,
            pending_count=self.pending_count,
            cancelled_count=self.cancelled_count,
            unclassifiable_count=self.unclassifiable_count,
            total_value=self.total_value,
            avg_value=avg_value,
            urgency_rate=urgency_rate,
            queue_counts=dict(self.queue_counts),
        )


def compute_metrics(results: Iterable[ClassificationResult]) -> AggregateMetrics:
    """Aggregate a collection of classification results in one pass."""

    accumulator = MetricsAccumulator()
    for result in results:
        accumulator.add(result)
    return accumulator.result()


__all__ = ["AggregateMetrics", "MetricsAccumulator", "compute_metrics"]
