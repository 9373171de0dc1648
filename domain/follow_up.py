"""
Domain: Back-office follow-up tasks.

A FollowUpTask records who owns the follow-up of a sale, the notes gathered
while working it, and whether it is still open. It is referenced by sale_id
and persisted by the repository layer, so assignment and notes survive
reloads.

Contract excerpts implemented here:
- At most one task per sale_id.
- Tasks are immutable; every transition returns a new instance with a fresh
  updated_at.
- A RESOLVED task cannot be reassigned or annotated; reopen it first.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from .sale import UNASSIGNED
from .time import require_utc_timestamp


class FollowUpStatus(str, Enum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"


@dataclass(frozen=True, slots=True)
class FollowUpNote:
    author: str
    text: str
    created_at: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if not self.text.strip():
            raise ValueError("note text must not be blank")


@dataclass(frozen=True, slots=True)
class FollowUpTask:
    sale_id: str
    updated_at: datetime
    assignee: str = UNASSIGNED
    status: FollowUpStatus = FollowUpStatus.OPEN
    notes: Tuple[FollowUpNote, ...] = ()

    def __post_init__(self) -> None:
        require_utc_timestamp("updated_at", self.updated_at)
        if not self.sale_id:
            raise ValueError("sale_id is required")

    @staticmethod
    def open(sale_id: str, *, at: datetime) -> "FollowUpTask":
        return FollowUpTask(sale_id=sale_id, updated_at=at)

    def _require_not_resolved(self, action: str) -> None:
        if self.status is FollowUpStatus.RESOLVED:
            raise ValueError(f"Cannot {action} a resolved follow-up (sale {self.sale_id})")

    def assign(self, assignee: str, *, at: datetime) -> "FollowUpTask":
        """Hand the task to `assignee`; an assigned open task moves to IN_PROGRESS."""

        self._require_not_resolved("reassign")
        name = assignee.strip()
        if not name:
            raise ValueError("assignee must not be blank")
        status = FollowUpStatus.IN_PROGRESS if name != UNASSIGNED else FollowUpStatus.OPEN
        return replace(self, assignee=name, status=status, updated_at=at)

    def add_note(self, *, author: str, text: str, at: datetime) -> "FollowUpTask":
        self._require_not_resolved("annotate")
        note = FollowUpNote(author=author, text=text.strip(), created_at=at)
        return replace(self, notes=self.notes + (note,), updated_at=at)

    def resolve(self, *, at: datetime) -> "FollowUpTask":
        self._require_not_resolved("resolve")
        return replace(self, status=FollowUpStatus.RESOLVED, updated_at=at)

    def reopen(self, *, at: datetime) -> "FollowUpTask":
        if self.status is not FollowUpStatus.RESOLVED:
            raise ValueError(f"Follow-up for sale {self.sale_id} is not resolved")
        status = FollowUpStatus.IN_PROGRESS if self.assignee != UNASSIGNED else FollowUpStatus.OPEN
        return replace(self, status=status, updated_at=at)

    @property
    def last_note(self) -> Optional[FollowUpNote]:
        return self.notes[-1] if self.notes else None


__all__ = ["FollowUpNote", "FollowUpStatus", "FollowUpTask"]
