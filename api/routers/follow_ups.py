"""
Follow-ups API Endpoints.

Endpoints for assigning, annotating, resolving and reopening back-office follow-ups.
"""

import logging

from fastapi import APIRouter, HTTPException

from api.models import (
    AddNoteRequest,
    AssignFollowUpRequest,
    ErrorResponse,
    FollowUpNoteResponse,
    FollowUpResponse,
)
from domain.follow_up import FollowUpTask
from repositories.sale_repository import get_sale_by_id
from services.follow_up_service import (
    add_follow_up_note,
    assign_follow_up,
    get_or_open_follow_up,
    reopen_follow_up,
    resolve_follow_up,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _follow_up_response(task: FollowUpTask) -> FollowUpResponse:
    return FollowUpResponse(
        sale_id=task.sale_id,
        assignee=task.assignee,
        status=task.status.value,
        notes=[
            FollowUpNoteResponse(author=note.author, text=note.text, created_at=note.created_at)
            for note in task.notes
        ],
        updated_at=task.updated_at,
    )


def _run(sale_id: str, action, description: str) -> FollowUpResponse:
    """Execute a follow-up action on an existing sale, mapping domain errors to HTTP errors."""
    try:
        if get_sale_by_id(sale_id) is None:
            raise HTTPException(status_code=404, detail=f"Sale not found: {sale_id}")
        return _follow_up_response(action())
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Follow-up action failed: %s", description)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to {description}: {str(e)}"
        )


@router.get(
    "/follow-ups/{sale_id}",
    response_model=FollowUpResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get Follow-up",
    description="Current follow-up task for a sale (an unsaved OPEN task if none exists)."
)
def get_follow_up(sale_id: str):
    return _run(sale_id, lambda: get_or_open_follow_up(sale_id), "load follow-up")


@router.put(
    "/follow-ups/{sale_id}/assignee",
    response_model=FollowUpResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Assign Follow-up",
)
def put_assignee(sale_id: str, request: AssignFollowUpRequest):
    """
    Assign a sale's follow-up to a back-office user.

    **Example request:**
    ```json
    {"assignee": "Marta García"}
    ```
    """
    return _run(sale_id, lambda: assign_follow_up(sale_id, request.assignee), "assign follow-up")


@router.post(
    "/follow-ups/{sale_id}/notes",
    response_model=FollowUpResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Add Follow-up Note",
)
def post_note(sale_id: str, request: AddNoteRequest):
    return _run(
        sale_id,
        lambda: add_follow_up_note(sale_id, author=request.author, text=request.text),
        "add note",
    )


@router.post(
    "/follow-ups/{sale_id}/resolve",
    response_model=FollowUpResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Resolve Follow-up",
)
def post_resolve(sale_id: str):
    return _run(sale_id, lambda: resolve_follow_up(sale_id), "resolve follow-up")


@router.post(
    "/follow-ups/{sale_id}/reopen",
    response_model=FollowUpResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Reopen Follow-up",
    description="Reopen a resolved follow-up; it goes back to its previous owner, if any."
)
def post_reopen(sale_id: str):
    return _run(sale_id, lambda: reopen_follow_up(sale_id), "reopen follow-up")
