"""
Tests for `domain/sale_age.py`.

Covers contract rules:
- Sale age is counted in whole 24-hour days, truncating partial days.
- Clock skew (created_at after as_of) clamps to 0, never negative.
- Raw created_at values are coerced; uninterpretable ones resolve to None.
- All timestamps held by SaleAge must be UTC timezone-aware.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from domain.sale_age import STALE_PENDING_DAYS, SaleAge

CREATED = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def test_days_since_creation_floors_partial_days() -> None:
    """Verify a sale just under 24h old is 0 days old and exactly 24h is 1 day."""

    just_under = CREATED + timedelta(hours=23, minutes=59, seconds=59)
    exact = CREATED + timedelta(days=1)

    assert SaleAge(created_at_utc=CREATED, as_of_utc=just_under).days_since_creation() == 0
    assert SaleAge(created_at_utc=CREATED, as_of_utc=exact).days_since_creation() == 1


def test_days_since_creation_clamps_clock_skew_to_zero() -> None:
    """Verify a created_at in the future yields 0, not a negative age."""

    as_of = CREATED - timedelta(days=2, hours=3)
    assert SaleAge(created_at_utc=CREATED, as_of_utc=as_of).days_since_creation() == 0


@pytest.mark.parametrize(
    "age, expected",
    [
        (timedelta(days=STALE_PENDING_DAYS), False),
        (timedelta(days=STALE_PENDING_DAYS, hours=23, minutes=59), False),
        (timedelta(days=STALE_PENDING_DAYS + 1), True),
    ],
)
def test_is_stale_boundary(age: timedelta, expected: bool) -> None:
    """Verify staleness starts strictly after 3 whole days."""

    assert SaleAge(created_at_utc=CREATED, as_of_utc=CREATED + age).is_stale() is expected


def test_resolve_accepts_iso_strings_and_dates() -> None:
    """Verify resolve() coerces ISO strings (with 'Z') and bare dates to UTC."""

    as_of = CREATED + timedelta(days=5)

    from_iso = SaleAge.resolve("2025-01-01T00:00:00Z", as_of)
    from_date = SaleAge.resolve("2025-01-01", as_of)

    assert from_iso is not None and from_iso.days_since_creation() == 5
    assert from_date is not None and from_date.days_since_creation() == 5


def test_resolve_normalizes_non_utc_offsets() -> None:
    """Verify an aware non-UTC created_at is converted, not rejected."""

    created_minus_5 = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone(timedelta(hours=-5)))
    as_of = datetime(2025, 1, 2, 4, 59, 59, tzinfo=timezone.utc)

    age = SaleAge.resolve(created_minus_5, as_of)
    assert age is not None
    assert age.days_since_creation() == 0


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "not a date",
        "2025-13-45",
        12345,
        object(),
        # Offsets that push the instant outside the datetime range
        "0001-01-01T00:00:00+05:00",
        "9999-12-31T23:59:59-05:00",
        datetime(1, 1, 1, 0, 0, 0, tzinfo=timezone(timedelta(hours=5))),
    ],
)
def test_resolve_returns_none_for_uninterpretable_values(raw: object) -> None:
    """Verify bad created_at values resolve to None instead of raising."""

    assert SaleAge.resolve(raw, CREATED) is None


def test_sale_age_requires_utc_timestamps() -> None:
    """Verify UTC timestamp enforcement when SaleAge is built directly."""

    naive = datetime(2025, 1, 1, 0, 0, 0)
    non_utc = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone(timedelta(hours=2)))

    with pytest.raises(ValueError):
        SaleAge(created_at_utc=naive, as_of_utc=CREATED)
    with pytest.raises(ValueError):
        SaleAge(created_at_utc=CREATED, as_of_utc=non_utc)
