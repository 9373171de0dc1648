"""
Domain: Sale records as seen by back-office triage.

A Sale is created by the sales-entry workflow and mutated by back-office and
logistics actions elsewhere. Triage only reads it.

Contract excerpts relevant here:
- total_value = unit_price * quantity; derived, never stored.
- total_value is never negative. Factors that are missing, non-numeric, NaN,
  infinite or negative yield None so triage can flag the record.
- Status dimensions are independent; no transition rules live here.

Fields are deliberately lenient (Optional everywhere but sale_id). Records
arriving from the stores can be incomplete, and triage must be able to receive
them and report them as unclassifiable instead of failing the whole batch.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation, Overflow
from typing import Any, Optional, Union

from .sale_status import (
    AnyCommercialStatus,
    LineStatus,
    LogisticStatus,
    OriginMarket,
    ProductType,
    parse_commercial_status,
)

UNASSIGNED = "unassigned"

Numeric = Union[Decimal, int, float]


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a numeric-ish value to a finite Decimal.

    Returns None for None, booleans, unparsable strings, NaN and infinities.
    """

    if value is None or isinstance(value, bool):
        return None
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


@dataclass(frozen=True, slots=True)
class Sale:
    """
    Unit of classification for back-office triage.

    commercial_status may hold either the full CommercialStatus or the coarse
    BackOfficeStatus; priority rules collapse it to the coarse form.
    created_at may still be a raw value (e.g. an unparsed string) when the
    record came from an untrusted source; triage coerces it.
    """

    sale_id: str
    commercial_status: Optional[AnyCommercialStatus] = None
    logistic_status: Optional[LogisticStatus] = None
    line_status: Optional[LineStatus] = None
    product_type: Optional[ProductType] = None
    created_at: Union[datetime, str, None] = None
    unit_price: Optional[Numeric] = None
    quantity: Optional[Numeric] = None
    assignee: str = UNASSIGNED

    # Descriptive fields (search and filtering only)
    customer_name: Optional[str] = None
    document_number: Optional[str] = None
    phone_number: Optional[str] = None
    plan: Optional[str] = None
    promotion: Optional[str] = None
    advisor: Optional[str] = None
    supervisor: Optional[str] = None
    origin_market: Optional[OriginMarket] = None

    @property
    def total_value(self) -> Optional[Decimal]:
        """
        unit_price * quantity, or None if either factor is invalid or negative.

        A product too large for the decimal context is also None.
        """

        unit_price = to_decimal(self.unit_price)
        quantity = to_decimal(self.quantity)
        if unit_price is None or quantity is None:
            return None
        if unit_price < 0 or quantity < 0:
            return None
        try:
            return unit_price * quantity
        except (Overflow, InvalidOperation):
            return None

    @property
    def is_assigned(self) -> bool:
        return self.assignee != UNASSIGNED

    def normalized(self) -> "Sale":
        """
        Return a copy whose status dimensions are enum members.

        Raw labels (canonical names or the stores' Spanish labels) are parsed;
        anything unknown becomes None.
        """

        return replace(
            self,
            commercial_status=parse_commercial_status(self.commercial_status),
            logistic_status=LogisticStatus.parse(self.logistic_status),
            line_status=LineStatus.parse(self.line_status),
            product_type=ProductType.parse(self.product_type),
            origin_market=OriginMarket.parse(self.origin_market),
        )

    def with_assignee(self, assignee: Optional[str]) -> "Sale":
        """Return a copy owned by `assignee` (blank or None means unassigned)."""

        name = (assignee or "").strip()
        return replace(self, assignee=name or UNASSIGNED)


__all__ = ["Numeric", "Sale", "UNASSIGNED", "to_decimal"]
