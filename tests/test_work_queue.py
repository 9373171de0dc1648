"""
Tests for `domain/work_queue.py`.

Covers contract rules:
- Queue rules are evaluated in strict order; first match wins.
- A sale belongs to at most one queue.
- Sales never shipped (logistic INITIAL) are not "undelivered".
- Missing status dimensions are not bucketed.
"""

from __future__ import annotations

import itertools

import pytest

from conftest import make_sale
from domain.sale_status import CommercialStatus, LineStatus, LogisticStatus, ProductType
from domain.work_queue import WorkQueue, assign_work_queue, has_complete_statuses


def test_pending_pin_overrides_delivery_state() -> None:
    """A delivered portability still waiting for its PIN goes to PENDING_PIN."""
    sale = make_sale(
        line_status=LineStatus.PENDING_PORTABILITY,
        logistic_status=LogisticStatus.DELIVERED,
        product_type=ProductType.PORTABILITY,
    )
    assert assign_work_queue(sale) is WorkQueue.PENDING_PIN


@pytest.mark.parametrize("logistic", [LogisticStatus.DELIVERED, LogisticStatus.SETTLED_WITH_CUSTOMER])
def test_delivered_portability(logistic) -> None:
    sale = make_sale(logistic_status=logistic, product_type=ProductType.PORTABILITY)
    assert assign_work_queue(sale) is WorkQueue.DELIVERED_PORTABILITY


def test_delivered_new_line_is_not_a_delivery_queue() -> None:
    """Only portability has a delivered queue; a delivered new line falls through."""
    sale = make_sale(logistic_status=LogisticStatus.DELIVERED, product_type=ProductType.NEW_LINE)
    assert assign_work_queue(sale) is None


@pytest.mark.parametrize(
    "product, expected",
    [
        (ProductType.PORTABILITY, WorkQueue.UNDELIVERED_PORTABILITY),
        (ProductType.NEW_LINE, WorkQueue.UNDELIVERED_NEW_LINE),
        (ProductType.FIBER, None),
    ],
)
def test_undelivered_in_transit(product, expected) -> None:
    sale = make_sale(logistic_status=LogisticStatus.IN_TRANSIT, product_type=product)
    assert assign_work_queue(sale) is expected


def test_assigned_portability_is_undelivered_not_scheduled() -> None:
    """ASSIGNED is a shipped, undelivered state; the undelivered rule comes first."""
    sale = make_sale(logistic_status=LogisticStatus.ASSIGNED, product_type=ProductType.PORTABILITY)
    assert assign_work_queue(sale) is WorkQueue.UNDELIVERED_PORTABILITY


def test_assigned_fiber_is_scheduled() -> None:
    sale = make_sale(logistic_status=LogisticStatus.ASSIGNED, product_type=ProductType.FIBER)
    assert assign_work_queue(sale) is WorkQueue.SCHEDULED


def test_in_progress_not_shipped_is_scheduled() -> None:
    sale = make_sale(
        commercial_status=CommercialStatus.IN_PROGRESS,
        logistic_status=LogisticStatus.INITIAL,
        product_type=ProductType.PORTABILITY,
    )
    assert assign_work_queue(sale) is WorkQueue.SCHEDULED


def test_initial_logistics_is_unbucketed() -> None:
    sale = make_sale(logistic_status=LogisticStatus.INITIAL, product_type=ProductType.PORTABILITY)
    assert assign_work_queue(sale) is None


@pytest.mark.parametrize(
    "missing", ["commercial_status", "logistic_status", "line_status", "product_type"]
)
def test_missing_dimension_is_not_bucketed(missing) -> None:
    overrides = {
        "logistic_status": LogisticStatus.IN_TRANSIT,
        "product_type": ProductType.PORTABILITY,
    }
    overrides[missing] = None
    sale = make_sale(**overrides)
    assert has_complete_statuses(sale) is False
    assert assign_work_queue(sale) is None


def _queue_predicates(sale):
    """Loose, order-free membership conditions for each queue."""
    delivered = sale.logistic_status in (LogisticStatus.DELIVERED, LogisticStatus.SETTLED_WITH_CUSTOMER)
    shipped = sale.logistic_status is not LogisticStatus.INITIAL
    return {
        WorkQueue.PENDING_PIN: sale.line_status is LineStatus.PENDING_PORTABILITY,
        WorkQueue.DELIVERED_PORTABILITY: delivered and sale.product_type is ProductType.PORTABILITY,
        WorkQueue.UNDELIVERED_PORTABILITY: not delivered and shipped and sale.product_type is ProductType.PORTABILITY,
        WorkQueue.UNDELIVERED_NEW_LINE: not delivered and shipped and sale.product_type is ProductType.NEW_LINE,
        WorkQueue.SCHEDULED: sale.commercial_status is CommercialStatus.IN_PROGRESS
        or sale.logistic_status is LogisticStatus.ASSIGNED,
    }


def test_every_status_combination_gets_at_most_one_queue() -> None:
    """
    Exhaustive check over all enum combinations: the assigned queue is the
    first loosely-matching one in rule order, and there is never more than one.
    """
    order = list(WorkQueue)
    for commercial, logistic, line, product in itertools.product(
        CommercialStatus, LogisticStatus, LineStatus, ProductType
    ):
        sale = make_sale(
            commercial_status=commercial,
            logistic_status=logistic,
            line_status=line,
            product_type=product,
        )
        queue = assign_work_queue(sale)
        loose = _queue_predicates(sale)
        first_match = next((q for q in order if loose[q]), None)

        assert queue is first_match
        assert isinstance(queue, (WorkQueue, type(None)))
