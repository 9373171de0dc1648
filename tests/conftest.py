"""
Pytest configuration and shared fixtures.

This file adds the project root to the Python path so that tests can import
from the domain, services, repositories and api modules, and provides a
small sale factory plus an in-memory stand-in for the Supabase query builder.
"""

import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.sale import Sale  # noqa: E402
from domain.sale_status import (  # noqa: E402
    CommercialStatus,
    LineStatus,
    LogisticStatus,
    ProductType,
)

AS_OF = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def as_of() -> datetime:
    return AS_OF


def make_sale(**overrides: Any) -> Sale:
    """
    Build a fully-classifiable sale with neutral defaults.

    Defaults land in NORMAL priority and no queue: a completed, cheap new line
    that never left the warehouse.
    """

    values: Dict[str, Any] = {
        "sale_id": "V-1",
        "commercial_status": CommercialStatus.ACTIVATED,
        "logistic_status": LogisticStatus.INITIAL,
        "line_status": LineStatus.ACTIVE,
        "product_type": ProductType.NEW_LINE,
        "created_at": AS_OF,
        "unit_price": 100,
        "quantity": 1,
    }
    values.update(overrides)
    return Sale(**values)


@dataclass
class FakeResponse:
    data: List[Dict[str, Any]]
    error: Optional[str] = None


@dataclass
class FakeQuery:
    """Records the chained calls a repository makes and returns canned rows."""

    table: "FakeTable"
    calls: List[tuple] = field(default_factory=list)

    def __getattr__(self, name: str):
        def _chain(*args: Any, **kwargs: Any) -> "FakeQuery":
            self.calls.append((name, args, kwargs))
            return self

        return _chain

    def execute(self) -> FakeResponse:
        self.table.executed.append(self.calls)
        for name, args, _ in self.calls:
            if name in ("insert", "upsert"):
                self.table.written.append(args[0])
        return FakeResponse(data=list(self.table.rows), error=self.table.error)


@dataclass
class FakeTable:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None
    executed: List[List[tuple]] = field(default_factory=list)
    written: List[Dict[str, Any]] = field(default_factory=list)


class FakeSupabase:
    """Minimal stand-in for supabase.Client: table(name) -> chainable query."""

    def __init__(self) -> None:
        self.tables: Dict[str, FakeTable] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(table=self.tables.setdefault(name, FakeTable()))


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()
