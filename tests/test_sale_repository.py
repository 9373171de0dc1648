"""
Tests for `repositories/sale_repository.py`.

Uses the in-memory FakeSupabase from conftest in place of the real client.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from conftest import FakeTable
from domain.sale_status import BackOfficeStatus, CommercialStatus, LineStatus, LogisticStatus, ProductType
from repositories import sale_repository
from repositories.sale_repository import get_sale_by_id, list_sales, row_to_sale

ROW = {
    "sale_id": "V-42",
    "commercial_status": "EN PROCESO",
    "logistic_status": "ENTREGADO",
    "line_status": "ACTIVA",
    "product_type": "PORTABILIDAD",
    "created_at_utc": "2025-06-10T14:00:00Z",
    "unit_price": "45.50",
    "quantity": 2,
    "assignee": None,
    "customer_name": "  María Gómez ",
    "document_number": "30111222",
    "phone_number": "",
    "plan": "Plan 20GB",
    "origin_market": "PREPAGO",
}


@pytest.fixture
def client(monkeypatch, fake_supabase):
    monkeypatch.setattr(sale_repository, "get_supabase", lambda: fake_supabase)
    return fake_supabase


def test_row_to_sale_maps_store_labels() -> None:
    sale = row_to_sale(ROW)

    assert sale.sale_id == "V-42"
    assert sale.commercial_status is CommercialStatus.IN_PROGRESS
    assert sale.logistic_status is LogisticStatus.DELIVERED
    assert sale.line_status is LineStatus.ACTIVE
    assert sale.product_type is ProductType.PORTABILITY
    assert sale.created_at == datetime(2025, 6, 10, 14, 0, tzinfo=timezone.utc)
    assert sale.total_value == Decimal("91.00")
    assert sale.assignee == "unassigned"
    assert sale.customer_name == "María Gómez"
    assert sale.phone_number is None


def test_row_to_sale_is_lenient_with_bad_values() -> None:
    """Verify unknown labels and garbage values map to None instead of raising."""

    sale = row_to_sale(
        {
            "sale_id": 7,
            "commercial_status": "Pendiente",
            "logistic_status": "???",
            "created_at_utc": "last tuesday",
            "unit_price": "free",
        }
    )

    assert sale.sale_id == "7"
    assert sale.commercial_status is BackOfficeStatus.PENDING
    assert sale.logistic_status is None
    assert sale.created_at == "last tuesday"
    assert sale.total_value is None


def test_list_sales_queries_most_recent_first(client) -> None:
    client.tables["sales_triage"] = table = FakeTable(rows=[ROW])

    sales = list_sales(limit=25)

    assert [sale.sale_id for sale in sales] == ["V-42"]
    calls = table.executed[0]
    assert ("order", ("created_at_utc",), {"desc": True}) in calls
    assert ("limit", (25,), {}) in calls


def test_get_sale_by_id_returns_none_when_missing(client) -> None:
    assert get_sale_by_id("nope") is None
    calls = client.tables["sales_triage"].executed[0]
    assert ("eq", ("sale_id", "nope"), {}) in calls


def test_get_sale_by_id(client) -> None:
    client.table("sales_triage").table.rows.append(ROW)
    assert get_sale_by_id("V-42").product_type is ProductType.PORTABILITY


def test_store_error_raises(client) -> None:
    client.table("sales_triage").table.error = "permission denied"

    with pytest.raises(RuntimeError, match="permission denied"):
        list_sales()
