"""
Tests for `services/follow_up_service.py`.

The repository functions are replaced with an in-memory dict so the service
logic (load or open, transition, persist) is tested without Supabase.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_sale
from domain.follow_up import FollowUpStatus, FollowUpTask
from domain.sale import UNASSIGNED
from services import follow_up_service

T0 = datetime(2025, 6, 15, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(monkeypatch):
    tasks = {}

    def fake_get(sale_id):
        return tasks.get(sale_id)

    def fake_upsert(task):
        tasks[task.sale_id] = task
        return task

    monkeypatch.setattr(follow_up_service, "get_follow_up", fake_get)
    def fake_get_many(sale_ids):
        return {sale_id: tasks[sale_id] for sale_id in sale_ids if sale_id in tasks}

    monkeypatch.setattr(follow_up_service, "get_follow_ups", fake_get_many)
    monkeypatch.setattr(follow_up_service, "upsert_follow_up", fake_upsert)
    return tasks


def test_get_or_open_does_not_persist(store) -> None:
    """Verify a sale with no task gets an unsaved OPEN task."""

    task = follow_up_service.get_or_open_follow_up("V-1", at=T0)

    assert task.status is FollowUpStatus.OPEN
    assert store == {}


def test_assign_opens_and_persists(store) -> None:
    task = follow_up_service.assign_follow_up("V-1", "Carla", at=T0)

    assert task.assignee == "Carla"
    assert task.status is FollowUpStatus.IN_PROGRESS
    assert store["V-1"] == task


def test_note_builds_on_stored_task(store) -> None:
    store["V-1"] = FollowUpTask.open("V-1", at=T0).assign("Carla", at=T0)

    task = follow_up_service.add_follow_up_note(
        "V-1", author="Carla", text="Waiting on courier", at=T0 + timedelta(hours=1)
    )

    assert task.assignee == "Carla"
    assert task.last_note.text == "Waiting on courier"
    assert store["V-1"].notes == task.notes


def test_resolve_twice_raises(store) -> None:
    follow_up_service.resolve_follow_up("V-1", at=T0)

    with pytest.raises(ValueError):
        follow_up_service.resolve_follow_up("V-1", at=T0 + timedelta(minutes=5))


def test_blank_assignee_is_not_persisted(store) -> None:
    with pytest.raises(ValueError):
        follow_up_service.assign_follow_up("V-1", "  ", at=T0)
    assert store == {}


def test_default_timestamp_is_utc_now(store, monkeypatch) -> None:
    monkeypatch.setattr(follow_up_service, "utc_now", lambda: T0)

    task = follow_up_service.assign_follow_up("V-9", "Luis")

    assert task.updated_at == T0


def test_reopen_returns_task_to_owner(store) -> None:
    follow_up_service.assign_follow_up("V-1", "Carla", at=T0)
    follow_up_service.resolve_follow_up("V-1", at=T0 + timedelta(hours=1))

    task = follow_up_service.reopen_follow_up("V-1", at=T0 + timedelta(hours=2))

    assert task.status is FollowUpStatus.IN_PROGRESS
    assert task.assignee == "Carla"
    assert store["V-1"] == task


def test_reopen_unresolved_task_raises(store) -> None:
    with pytest.raises(ValueError):
        follow_up_service.reopen_follow_up("V-1", at=T0)
    assert store == {}


def test_apply_follow_up_assignees(store) -> None:
    """Verify sales pick up the assignee stored on their follow-up, in input order."""

    store["V-2"] = FollowUpTask.open("V-2", at=T0).assign("Carla", at=T0)

    sales = follow_up_service.apply_follow_up_assignees(
        make_sale(sale_id=sale_id) for sale_id in ("V-1", "V-2", "V-3")
    )

    assert [sale.sale_id for sale in sales] == ["V-1", "V-2", "V-3"]
    assert [sale.assignee for sale in sales] == [UNASSIGNED, "Carla", UNASSIGNED]
    assert sales[1].is_assigned is True
