"""
Triage API Endpoints.

Endpoints for the back-office follow-up list and the tracking queues.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from api.models import (
    ClassificationResponse,
    ErrorResponse,
    MetricsResponse,
    QueueCountsResponse,
    TriageCaseResponse,
    TriageListResponse,
)
from api.settings import settings
from domain.classification import ClassificationResult
from domain.priority import Priority
from domain.sale_status import parse_commercial_status
from domain.time import coerce_utc_timestamp
from domain.work_queue import WorkQueue
from repositories.sale_repository import get_sale_by_id, list_sales
from services.follow_up_service import apply_follow_up_assignees
from services.triage_service import (
    TriageEntry,
    TriageFilters,
    classify_single_sale,
    triage_sales,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _enum_value(value) -> Optional[str]:
    return getattr(value, "value", value)


def _classification_response(result: ClassificationResult) -> ClassificationResponse:
    return ClassificationResponse(
        sale_id=result.sale_id,
        priority=result.priority.value,
        reason=result.reason,
        queue=_enum_value(result.bucket),
        total_value=result.total_value,
        unclassifiable=result.unclassifiable,
    )


def _case_response(entry: TriageEntry) -> TriageCaseResponse:
    sale = entry.sale
    return TriageCaseResponse(
        sale_id=sale.sale_id,
        customer_name=sale.customer_name,
        commercial_status=_enum_value(sale.commercial_status),
        logistic_status=_enum_value(sale.logistic_status),
        line_status=_enum_value(sale.line_status),
        product_type=_enum_value(sale.product_type),
        plan=sale.plan,
        advisor=sale.advisor,
        assignee=sale.assignee,
        created_at=coerce_utc_timestamp(sale.created_at),
        classification=_classification_response(entry.classification),
    )


def _parse_filters(
    search: Optional[str],
    status: Optional[str],
    priority: Optional[str],
    queue: Optional[str],
) -> TriageFilters:
    parsed_status = None
    if status:
        parsed_status = parse_commercial_status(status)
        if parsed_status is None:
            raise HTTPException(status_code=400, detail=f"Invalid status. Got '{status}'")

    parsed_priority = None
    if priority:
        try:
            parsed_priority = Priority(priority.strip().upper())
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid priority. Must be HIGH, MEDIUM or NORMAL, got '{priority}'"
            )

    parsed_queue = None
    if queue:
        try:
            parsed_queue = WorkQueue(queue.strip().upper())
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid queue. Got '{queue}'")

    return TriageFilters(
        search=search,
        status=parsed_status,
        priority=parsed_priority,
        queue=parsed_queue,
    )


@router.get(
    "/triage",
    response_model=TriageListResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Back-office Triage List",
    description="Classify stored sales and return the follow-up list, highest priority first."
)
def get_triage(
    search: Optional[str] = Query(None, description="Match sale ID, customer, product/plan or reason"),
    status: Optional[str] = Query(None, description="Filter by status (e.g. 'PENDING', 'IN_PROGRESS')"),
    priority: Optional[str] = Query(None, description="Filter by priority ('HIGH', 'MEDIUM', 'NORMAL')"),
    queue: Optional[str] = Query(None, description="Filter by tracking queue (e.g. 'PENDING_PIN')"),
    limit: int = Query(500, ge=1, description="Maximum number of sales to triage"),
):
    """
    Triage stored sales for back-office follow-up.

    Metrics describe every sale fetched; filters only narrow the returned items.

    **Example usage:**
    - Everything: `GET /api/v1/triage`
    - Urgent cases: `GET /api/v1/triage?priority=HIGH`
    - Pending PIN queue: `GET /api/v1/triage?queue=PENDING_PIN`
    """
    filters = _parse_filters(search, status, priority, queue)

    try:
        sales = list_sales(limit=min(limit, settings.triage_max_sales))
        sales = apply_follow_up_assignees(sales)
        report = triage_sales(sales, filters=filters)

        m = report.metrics
        filters_applied = {
            key: value
            for key, value in {
                "search": search,
                "status": status,
                "priority": priority,
                "queue": queue,
            }.items()
            if value
        }

        return TriageListResponse(
            as_of=report.as_of,
            items=[_case_response(entry) for entry in report.entries],
            total_count=report.total_count,
            shown_count=report.shown_count,
            metrics=MetricsResponse(
                total_cases=m.total_cases,
                high_priority_count=m.high_priority_count,
                medium_priority_count=m.medium_priority_count,
                pending_count=m.pending_count,
                cancelled_count=m.cancelled_count,
                unclassifiable_count=m.unclassifiable_count,
                total_value=m.total_value,
                avg_value=m.avg_value,
                urgency_rate=m.urgency_rate,
            ),
            filters_applied=filters_applied,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Triage request failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to triage sales: {str(e)}"
        )


@router.get(
    "/triage/queues",
    response_model=QueueCountsResponse,
    summary="Tracking Queue Counts",
    description="Number of stored sales in each tracking queue."
)
def get_queue_counts(
    limit: int = Query(500, ge=1, description="Maximum number of sales to triage"),
):
    """Count stored sales per tracking queue (badge numbers for the tracking tabs)."""
    try:
        report = triage_sales(list_sales(limit=min(limit, settings.triage_max_sales)))
        counts = report.metrics.queue_counts

        return QueueCountsResponse(
            as_of=report.as_of,
            queues={queue.value: counts.get(queue, 0) for queue in WorkQueue},
            unbucketed=counts.get(None, 0),
            unclassifiable=report.metrics.unclassifiable_count,
        )

    except Exception as e:
        logger.exception("Queue count request failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to count queues: {str(e)}"
        )


@router.get(
    "/triage/{sale_id}",
    response_model=ClassificationResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Classify Sale",
    description="Classify a single stored sale."
)
def get_sale_classification(sale_id: str):
    """Return the priority, reason and tracking queue for one sale."""
    try:
        sale = get_sale_by_id(sale_id)
        if sale is None:
            raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")

        return _classification_response(classify_single_sale(sale))

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Classification request failed for sale %s", sale_id)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to classify sale: {str(e)}"
        )
