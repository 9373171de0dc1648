"""
Sale filter service for the management view.

Narrows a sale list before it is triaged or split into tracking queues. Every
criterion is optional; None means "all". Order of the input is preserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from domain.sale import Sale
from domain.sale_status import AnyCommercialStatus, LogisticStatus, ProductType
from domain.time import coerce_utc_timestamp


@dataclass(frozen=True, slots=True)
class SaleFilters:
    """
    Filter criteria for sale lists.

    search matches (case-insensitive) against sale id, customer name, document
    number and phone number. start_date/end_date are inclusive and compare the
    UTC calendar date of created_at; sales with no usable created_at are
    excluded once a date bound is set.
    """
    search: Optional[str] = None
    commercial_status: Optional[AnyCommercialStatus] = None
    logistic_status: Optional[LogisticStatus] = None
    product_type: Optional[ProductType] = None
    advisor: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self) -> None:
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be <= end_date")

    def matches(self, sale: Sale) -> bool:
        if self.search:
            needle = self.search.strip().lower()
            fields = (sale.sale_id, sale.customer_name, sale.document_number, sale.phone_number)
            if needle and not any(needle in value.lower() for value in fields if value):
                return False

        if self.commercial_status is not None and sale.commercial_status is not self.commercial_status:
            return False
        if self.logistic_status is not None and sale.logistic_status is not self.logistic_status:
            return False
        if self.product_type is not None and sale.product_type is not self.product_type:
            return False
        if self.advisor is not None and sale.advisor != self.advisor:
            return False

        if self.start_date is not None or self.end_date is not None:
            created_at = coerce_utc_timestamp(sale.created_at)
            if created_at is None:
                return False
            created_on = created_at.date()
            if self.start_date is not None and created_on < self.start_date:
                return False
            if self.end_date is not None and created_on > self.end_date:
                return False

        return True


def filter_sales(sales: Iterable[Sale], filters: Optional[SaleFilters] = None) -> List[Sale]:
    """
    Apply management-view filters to a list of sales.

    Sales are normalized (raw status labels parsed) before matching, and the
    normalized copies are returned.

    Example:
        porta = filter_sales(sales, SaleFilters(product_type=ProductType.PORTABILITY))
    """
    normalized = [sale.normalized() for sale in sales]
    if filters is None:
        return normalized
    return [sale for sale in normalized if filters.matches(sale)]


__all__ = ["SaleFilters", "filter_sales"]
