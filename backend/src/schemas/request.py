"""
Pydantic schemas for participation request API request/response validation.

Provides data validation and serialization for:
- Participation request representations
- Batch status updates by the event initiator and their result
"""

from typing import List

from pydantic import Field, field_validator

from backend.src.models import ParticipationRequest, RequestStatus
from backend.src.schemas.base import ApiModel, WireDatetime


class ParticipationRequestResponse(ApiModel):
    """
    Participation request as returned to clients.

    ``event`` and ``requester`` carry ids, not nested objects.
    """

    id: int
    created: WireDatetime
    event: int
    requester: int
    status: RequestStatus

    @classmethod
    def from_model(cls, request: ParticipationRequest) -> "ParticipationRequestResponse":
        return cls(
            id=request.id,
            created=request.created,
            event=request.event_id,
            requester=request.requester_id,
            status=request.status,
        )


class RequestStatusUpdate(ApiModel):
    """
    Batch decision on an event's pending requests.

    Example:
        >>> RequestStatusUpdate(requestIds=[3, 4, 5], status="CONFIRMED")
    """

    request_ids: List[int] = Field(default_factory=list)
    status: RequestStatus

    @field_validator("status")
    @classmethod
    def validate_decision(cls, v: RequestStatus) -> RequestStatus:
        """Only CONFIRMED and REJECTED are decisions."""
        if v not in (RequestStatus.CONFIRMED, RequestStatus.REJECTED):
            raise ValueError("Status must be CONFIRMED or REJECTED")
        return v


class RequestStatusUpdateResult(ApiModel):
    """Requests confirmed and rejected by a batch decision."""

    confirmed_requests: List[ParticipationRequestResponse] = Field(default_factory=list)
    rejected_requests: List[ParticipationRequestResponse] = Field(default_factory=list)
