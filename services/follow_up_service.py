"""
Follow-up service for back-office task handling.

Loads (or opens) the FollowUpTask for a sale, applies a domain transition and
persists the result. Validation errors from the domain entity (blank
assignee, acting on a resolved task) propagate as ValueError.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from domain.follow_up import FollowUpTask
from domain.sale import Sale
from domain.time import utc_now
from repositories.follow_up_repository import get_follow_up, get_follow_ups, upsert_follow_up

logger = logging.getLogger(__name__)


def _load_or_open(sale_id: str, at: datetime) -> FollowUpTask:
    task = get_follow_up(sale_id)
    if task is None:
        logger.info("Opening follow-up for sale %s", sale_id)
        task = FollowUpTask.open(sale_id, at=at)
    return task


def get_or_open_follow_up(sale_id: str, *, at: Optional[datetime] = None) -> FollowUpTask:
    """Current follow-up for a sale; an unsaved OPEN task if none exists yet."""

    return _load_or_open(sale_id, at or utc_now())


def assign_follow_up(sale_id: str, assignee: str, *, at: Optional[datetime] = None) -> FollowUpTask:
    """
    Assign the follow-up of a sale to a back-office user.

    Raises:
        ValueError: if assignee is blank or the task is resolved
    """

    at = at or utc_now()
    task = _load_or_open(sale_id, at).assign(assignee, at=at)
    logger.info("Follow-up for sale %s assigned to %s", sale_id, task.assignee)
    return upsert_follow_up(task)


def add_follow_up_note(
    sale_id: str,
    *,
    author: str,
    text: str,
    at: Optional[datetime] = None,
) -> FollowUpTask:
    """
    Append a note to the follow-up of a sale.

    Raises:
        ValueError: if the note text is blank or the task is resolved
    """

    at = at or utc_now()
    task = _load_or_open(sale_id, at).add_note(author=author, text=text, at=at)
    return upsert_follow_up(task)


def resolve_follow_up(sale_id: str, *, at: Optional[datetime] = None) -> FollowUpTask:
    """
    Mark the follow-up of a sale as resolved.

    Raises:
        ValueError: if the task is already resolved
    """

    at = at or utc_now()
    task = _load_or_open(sale_id, at).resolve(at=at)
    logger.info("Follow-up for sale %s resolved", sale_id)
    return upsert_follow_up(task)


def reopen_follow_up(sale_id: str, *, at: Optional[datetime] = None) -> FollowUpTask:
    """
    Reopen a resolved follow-up; it returns to its owner if it had one.

    Raises:
        ValueError: if the task is not resolved
    """

    at = at or utc_now()
    task = _load_or_open(sale_id, at).reopen(at=at)
    logger.info("Follow-up for sale %s reopened", sale_id)
    return upsert_follow_up(task)


def apply_follow_up_assignees(sales: Iterable[Sale]) -> List[Sale]:
    """
    Overlay the assignee stored on each sale's follow-up task.

    Assignment lives on the follow-up task, not on the sale row, so views
    listing sales read it from here. Sales without a task are returned as-is.
    """

    sales = list(sales)
    tasks = get_follow_ups(sale.sale_id for sale in sales)
    return [
        sale.with_assignee(tasks[sale.sale_id].assignee) if sale.sale_id in tasks else sale
        for sale in sales
    ]


__all__ = [
    "add_follow_up_note",
    "apply_follow_up_assignees",
    "assign_follow_up",
    "get_or_open_follow_up",
    "reopen_follow_up",
    "resolve_follow_up",
]
