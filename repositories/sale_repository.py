"""
Sale repository (persistence).

This module provides *only* read operations for Sale records used by triage.
It does not classify or validate business rules; rows are mapped leniently so
that incomplete records still reach triage and get reported as unclassifiable
instead of failing the request.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from domain.sale import Sale, to_decimal
from domain.sale_status import (
    LineStatus,
    LogisticStatus,
    OriginMarket,
    ProductType,
    parse_commercial_status,
)
from domain.time import coerce_utc_timestamp
from repositories.client import get_supabase

logger = logging.getLogger(__name__)

# Supabase view exposing one row per sale with its current status dimensions.
# Keep this aligned with your database schema.
_SALES_TABLE: str = "sales_triage"


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def row_to_sale(row: Mapping[str, Any]) -> Sale:
    """
    Convert a Supabase row into a Sale.

    Unknown status labels, unparsable timestamps and non-numeric prices map to
    None rather than raising. created_at keeps its raw value when it cannot be
    parsed so the triage log shows what was actually stored.
    """

    raw_created_at = row.get("created_at_utc")
    created_at = coerce_utc_timestamp(raw_created_at)

    unit_price = to_decimal(row.get("unit_price"))
    quantity = to_decimal(row.get("quantity"))

    return Sale(
        sale_id=str(row["sale_id"]),
        commercial_status=parse_commercial_status(row.get("commercial_status")),
        logistic_status=LogisticStatus.parse(row.get("logistic_status")),
        line_status=LineStatus.parse(row.get("line_status")),
        product_type=ProductType.parse(row.get("product_type")),
        created_at=created_at if created_at is not None else raw_created_at,
        unit_price=unit_price,
        quantity=quantity,
        assignee=_optional_str(row.get("assignee")) or "unassigned",
        customer_name=_optional_str(row.get("customer_name")),
        document_number=_optional_str(row.get("document_number")),
        phone_number=_optional_str(row.get("phone_number")),
        plan=_optional_str(row.get("plan")),
        promotion=_optional_str(row.get("promotion")),
        advisor=_optional_str(row.get("advisor")),
        supervisor=_optional_str(row.get("supervisor")),
        origin_market=OriginMarket.parse(row.get("origin_market")),
    )


def list_sales(limit: int = 1000) -> List[Sale]:
    """
    Retrieve sales for triage, most recent first.

    Args:
        limit: Maximum number of rows to fetch

    Returns:
        List[Sale] (possibly empty)
    """

    response = (
        get_supabase()
        .table(_SALES_TABLE)
        .select("*")
        .order("created_at_utc", desc=True)
        .limit(limit)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to list sales: {error}")

    rows = getattr(response, "data", None) or []
    logger.debug("Fetched %d sale rows from %s", len(rows), _SALES_TABLE)
    return [row_to_sale(row) for row in rows]


def get_sale_by_id(sale_id: str) -> Optional[Sale]:
    """
    Retrieve a single sale by its ID.

    Returns:
        Sale or None if not found
    """

    response = (
        get_supabase()
        .table(_SALES_TABLE)
        .select("*")
        .eq("sale_id", sale_id)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to get sale: {error}")

    rows = getattr(response, "data", None) or []

    if not rows:
        return None

    return row_to_sale(rows[0])


__all__ = [
    "get_sale_by_id",
    "list_sales",
    "row_to_sale",
]
