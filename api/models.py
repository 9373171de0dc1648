"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Triage Models
# ============================================================================

class ClassificationResponse(BaseModel):
    """Triage outcome for a single sale."""
    sale_id: str
    priority: str  # "HIGH", "MEDIUM" or "NORMAL"
    reason: str
    queue: Optional[str] = None  # "PENDING_PIN", etc.; None when unbucketed
    total_value: Optional[Decimal] = None
    unclassifiable: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "sale_id": "V-10234",
                "priority": "HIGH",
                "reason": "Pending more than 3 days",
                "queue": "UNDELIVERED_PORTABILITY",
                "total_value": "45.99",
                "unclassifiable": False
            }
        }


class TriageCaseResponse(BaseModel):
    """A sale in the back-office follow-up list."""
    sale_id: str
    customer_name: Optional[str] = None
    commercial_status: Optional[str] = None
    logistic_status: Optional[str] = None
    line_status: Optional[str] = None
    product_type: Optional[str] = None
    plan: Optional[str] = None
    advisor: Optional[str] = None
    assignee: str
    created_at: Optional[datetime] = None
    classification: ClassificationResponse


class MetricsResponse(BaseModel):
    """Aggregate figures for the whole triage batch."""
    total_cases: int
    high_priority_count: int
    medium_priority_count: int
    pending_count: int
    cancelled_count: int
    unclassifiable_count: int
    total_value: Decimal
    avg_value: Decimal
    urgency_rate: float

    class Config:
        json_schema_extra = {
            "example": {
                "total_cases": 100,
                "high_priority_count": 12,
                "medium_priority_count": 30,
                "pending_count": 25,
                "cancelled_count": 7,
                "unclassifiable_count": 1,
                "total_value": "48210.50",
                "avg_value": "482.105",
                "urgency_rate": 12.0
            }
        }


class TriageListResponse(BaseModel):
    """Response for the back-office triage list."""
    as_of: datetime
    items: List[TriageCaseResponse]
    total_count: int
    shown_count: int
    metrics: MetricsResponse
    filters_applied: dict


class QueueCountsResponse(BaseModel):
    """Number of sales per tracking queue."""
    as_of: datetime
    queues: Dict[str, int]
    unbucketed: int
    unclassifiable: int = 0  # Counted apart from the queues

    class Config:
        json_schema_extra = {
            "example": {
                "as_of": "2025-01-01T12:00:00Z",
                "queues": {
                    "PENDING_PIN": 4,
                    "DELIVERED_PORTABILITY": 10,
                    "UNDELIVERED_PORTABILITY": 6,
                    "UNDELIVERED_NEW_LINE": 3,
                    "SCHEDULED": 8
                },
                "unbucketed": 67,
                "unclassifiable": 2
            }
        }


# ============================================================================
# Follow-up Models
# ============================================================================

class AssignFollowUpRequest(BaseModel):
    """Request to assign a sale's follow-up to a back-office user."""
    assignee: str = Field(
        ...,
        min_length=1,
        description="Back-office user taking ownership of the follow-up"
    )


class AddNoteRequest(BaseModel):
    """Request to append a note to a follow-up."""
    author: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1, max_length=2000)

    class Config:
        json_schema_extra = {
            "example": {
                "author": "Marta García",
                "text": "Customer confirmed the PIN will arrive by SMS tomorrow."
            }
        }


class FollowUpNoteResponse(BaseModel):
    author: str
    text: str
    created_at: datetime


class FollowUpResponse(BaseModel):
    """Current state of a sale's follow-up task."""
    sale_id: str
    assignee: str
    status: str  # "OPEN", "IN_PROGRESS" or "RESOLVED"
    notes: List[FollowUpNoteResponse]
    updated_at: datetime


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Invalid request",
                "detail": "Unknown priority 'URGENT'",
                "status_code": 400
            }
        }
