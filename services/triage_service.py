"""
Triage service for back-office follow-up.

Runs one classification pass over a batch of sales:
- Snapshots "now" once so every sale is aged against the same instant
- Classifies each sale exactly once
- Folds aggregate metrics into the same loop
- Applies the back-office filters (search, status, priority, queue)
- Orders cases by priority, highest first

Metrics always describe the whole batch; filters only narrow the entries
returned, mirroring the "showing X of Y cases" view.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from domain.classification import ClassificationResult, classify_sale
from domain.metrics import AggregateMetrics, MetricsAccumulator
from domain.priority import Priority
from domain.sale import Sale
from domain.sale_status import (
    AnyCommercialStatus,
    BackOfficeStatus,
    coarse_status,
)
from domain.time import require_utc_timestamp, utc_now
from domain.work_queue import WorkQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TriageEntry:
    """A sale together with its classification for this pass."""

    sale: Sale
    classification: ClassificationResult

    @property
    def priority(self) -> Priority:
        return self.classification.priority

    @property
    def bucket(self) -> Optional[WorkQueue]:
        return self.classification.bucket


@dataclass(frozen=True, slots=True)
class TriageFilters:
    """
    Back-office filter criteria. None means "all".

    status accepts either the coarse back-office status (matched against the
    collapsed status) or a full commercial status (matched exactly).
    """

    search: Optional[str] = None
    status: Optional[AnyCommercialStatus] = None
    priority: Optional[Priority] = None
    queue: Optional[WorkQueue] = None

    def matches(self, entry: TriageEntry) -> bool:
        if self.search and not _matches_search(entry, self.search):
            return False

        if self.status is not None:
            sale_status = entry.sale.commercial_status
            if isinstance(self.status, BackOfficeStatus):
                if coarse_status(sale_status) is not self.status:
                    return False
            elif sale_status is not self.status:
                return False

        if self.priority is not None and entry.priority is not self.priority:
            return False

        if self.queue is not None and entry.bucket is not self.queue:
            return False

        return True


@dataclass(frozen=True, slots=True)
class TriageReport:
    """
    Result of a triage pass.

    entries: filtered cases, highest priority first (stable within a priority)
    metrics: aggregates over the full, unfiltered batch
    total_count: number of sales in the batch before filtering
    """

    as_of: datetime
    entries: List[TriageEntry]
    metrics: AggregateMetrics
    total_count: int

    @property
    def shown_count(self) -> int:
        return len(self.entries)

    @property
    def unclassifiable(self) -> List[TriageEntry]:
        return [entry for entry in self.entries if entry.classification.unclassifiable]


def _matches_search(entry: TriageEntry, search: str) -> bool:
    """Case-insensitive substring match on id, customer, product/plan and reason."""

    needle = search.strip().lower()
    if not needle:
        return True

    sale = entry.sale
    product = getattr(sale.product_type, "value", sale.product_type)
    haystack = (
        sale.sale_id,
        sale.customer_name,
        product,
        sale.plan,
        entry.classification.reason,
    )
    return any(needle in str(value).lower() for value in haystack if value)


def triage_sales(
    sales: Iterable[Sale],
    *,
    as_of: Optional[datetime] = None,
    filters: Optional[TriageFilters] = None,
) -> TriageReport:
    """
    Classify a batch of sales and build the back-office triage report.

    Args:
        sales: Sales to triage (already fetched; no I/O happens here)
        as_of: UTC instant to age sales against (default: now, snapshotted once)
        filters: Optional back-office filters applied to the returned entries

    Returns:
        TriageReport with sorted, filtered entries and whole-batch metrics

    Example:
        report = triage_sales(list_sales(), filters=TriageFilters(priority=Priority.HIGH))
        print(f"{report.shown_count} urgent cases of {report.total_count}")
    """
    if as_of is None:
        as_of = utc_now()
    require_utc_timestamp("as_of", as_of)

    accumulator = MetricsAccumulator()
    selected: List[TriageEntry] = []

    for raw_sale in sales:
        sale = raw_sale.normalized()
        classification = classify_sale(sale, as_of=as_of)
        accumulator.add(classification)

        if classification.unclassifiable:
            logger.warning(
                "Sale %s is unclassifiable (status=%r, value=%r, created_at=%r)",
                sale.sale_id,
                sale.commercial_status,
                sale.total_value,
                sale.created_at,
            )

        entry = TriageEntry(sale=sale, classification=classification)
        if filters is None or filters.matches(entry):
            selected.append(entry)

    # sorted() is stable, so ties keep their input order.
    selected = sorted(selected, key=lambda entry: entry.priority.rank, reverse=True)
    metrics = accumulator.result()

    logger.info(
        "Triage pass as of %s: %d sales, %d shown, %d high priority, %d unclassifiable",
        as_of.isoformat(),
        metrics.total_cases,
        len(selected),
        metrics.high_priority_count,
        metrics.unclassifiable_count,
    )

    return TriageReport(
        as_of=as_of,
        entries=selected,
        metrics=metrics,
        total_count=metrics.total_cases,
    )


def classify_single_sale(sale: Sale, *, as_of: Optional[datetime] = None) -> ClassificationResult:
    """Classify one sale, snapshotting now if as_of is not given."""

    if as_of is None:
        as_of = utc_now()
    return classify_sale(sale, as_of=as_of)


def sales_in_queue(report: TriageReport, queue: Optional[WorkQueue]) -> List[TriageEntry]:
    """
    Entries of the report that sit in `queue`.

    None selects the unbucketed entries; unclassifiable sales are never
    unbucketed, they are listed by TriageReport.unclassifiable instead.
    """

    return [
        entry
        for entry in report.entries
        if entry.bucket is queue and not entry.classification.unclassifiable
    ]


__all__ = [
    "TriageEntry",
    "TriageFilters",
    "TriageReport",
    "classify_single_sale",
    "sales_in_queue",
    "triage_sales",
]
