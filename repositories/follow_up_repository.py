"""
Follow-up task repository (persistence).

Stores back-office FollowUpTask records keyed by sale_id. Notes are kept as a
JSON array on the task row. Business rules (who may resolve, blank assignees)
live on the domain entity, not here.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional

from domain.follow_up import FollowUpNote, FollowUpStatus, FollowUpTask
from domain.time import coerce_utc_timestamp, require_utc_timestamp
from repositories.client import get_supabase

logger = logging.getLogger(__name__)

# Supabase table name for follow-up tasks.
# Keep this aligned with your database schema.
_FOLLOW_UPS_TABLE: str = "follow_up_tasks"

# Max sale ids per `in` filter in a batch lookup.
_IN_FILTER_CHUNK: int = 100


def _to_iso_utc(dt: datetime, *, name: str) -> str:
    """Serialize a UTC datetime to ISO-8601 (timezone-aware, offset 0)."""

    require_utc_timestamp(name, dt)
    return dt.astimezone(timezone.utc).isoformat()


def _parse_utc_datetime(value: Any) -> datetime:
    """
    Parse a Supabase timestamp into a timezone-aware UTC datetime.

    Supabase commonly returns ISO-8601 strings, sometimes with a trailing 'Z'.

    Raises:
        ValueError: if the value is not a usable timestamp
    """

    dt = coerce_utc_timestamp(value)
    if dt is None:
        raise ValueError(f"Invalid timestamp: {value!r}")
    return dt


def _row_to_task(row: Mapping[str, Any]) -> FollowUpTask:
    """Convert a Supabase row into a FollowUpTask."""

    notes = tuple(
        FollowUpNote(
            author=str(note["author"]),
            text=str(note["text"]),
            created_at=_parse_utc_datetime(note["created_at_utc"]),
        )
        for note in (row.get("notes") or [])
    )

    return FollowUpTask(
        sale_id=str(row["sale_id"]),
        assignee=str(row.get("assignee") or "unassigned"),
        status=FollowUpStatus(str(row.get("status", FollowUpStatus.OPEN.value))),
        notes=notes,
        updated_at=_parse_utc_datetime(row["updated_at_utc"]),
    )


def _task_to_payload(task: FollowUpTask) -> dict[str, Any]:
    return {
        "sale_id": task.sale_id,
        "assignee": task.assignee,
        "status": task.status.value,
        "notes": [
            {
                "author": note.author,
                "text": note.text,
                "created_at_utc": _to_iso_utc(note.created_at, name="note.created_at"),
            }
            for note in task.notes
        ],
        "updated_at_utc": _to_iso_utc(task.updated_at, name="updated_at"),
    }


def get_follow_up(sale_id: str) -> Optional[FollowUpTask]:
    """
    Retrieve the follow-up task for a sale.

    Returns:
        FollowUpTask or None if the sale has no task yet
    """

    response = (
        get_supabase()
        .table(_FOLLOW_UPS_TABLE)
        .select("*")
        .eq("sale_id", sale_id)
        .limit(1)
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to get follow-up: {error}")

    rows = getattr(response, "data", None) or []

    if not rows:
        return None

    return _row_to_task(rows[0])


def get_follow_ups(sale_ids: Iterable[str]) -> Dict[str, FollowUpTask]:
    """
    Retrieve the follow-up tasks for many sales at once.

    Ids are queried in chunks of _IN_FILTER_CHUNK to keep the request URL
    short. Rows that cannot be parsed are logged and skipped so one corrupt
    task does not hide the others.

    Returns:
        Dict mapping sale_id -> FollowUpTask (sales without a task are absent)
    """

    ids = list(dict.fromkeys(sale_ids))
    tasks: Dict[str, FollowUpTask] = {}

    for start in range(0, len(ids), _IN_FILTER_CHUNK):
        chunk = ids[start:start + _IN_FILTER_CHUNK]
        response = (
            get_supabase()
            .table(_FOLLOW_UPS_TABLE)
            .select("*")
            .in_("sale_id", chunk)
            .execute()
        )
        error = getattr(response, "error", None)
        if error:
            raise RuntimeError(f"Failed to list follow-ups: {error}")

        for row in getattr(response, "data", None) or []:
            try:
                task = _row_to_task(row)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable follow-up row for sale %s: %s", row.get("sale_id"), e)
                continue
            tasks[task.sale_id] = task

    return tasks


def upsert_follow_up(task: FollowUpTask) -> FollowUpTask:
    """
    Insert or replace the follow-up task for task.sale_id.

    Returns:
        The task as stored
    """

    response = (
        get_supabase()
        .table(_FOLLOW_UPS_TABLE)
        .upsert(_task_to_payload(task), on_conflict="sale_id")
        .execute()
    )
    error = getattr(response, "error", None)
    if error:
        raise RuntimeError(f"Failed to save follow-up: {error}")

    return task


__all__ = [
    "get_follow_up",
    "get_follow_ups",
    "upsert_follow_up",
]
