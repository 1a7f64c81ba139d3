"""
Requester API endpoints for participation requests.

Provides:
- Submit a participation request for an event
- List the user's own requests
- Cancel one of the user's requests
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from backend.src.api.dependencies import get_request_service
from backend.src.schemas.request import ParticipationRequestResponse
from backend.src.services.request_service import RequestService


router = APIRouter(
    prefix="/users/{user_id}/requests",
    tags=["Participation requests"],
)


@router.post(
    "",
    response_model=ParticipationRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request participation in an event",
)
def create_request(
    user_id: int,
    event_id: int = Query(..., alias="eventId"),
    request_service: RequestService = Depends(get_request_service),
) -> ParticipationRequestResponse:
    """
    Submit a participation request.

    Returns 409 when the event is full, not published, initiated by the
    caller, or already requested by the caller. Events without moderation or
    without a participant limit confirm the request at once.
    """
    request = request_service.create_request(requester_id=user_id, event_id=event_id)
    return ParticipationRequestResponse.from_model(request)


@router.get(
    "",
    response_model=List[ParticipationRequestResponse],
    summary="List the user's requests",
)
def list_user_requests(
    user_id: int,
    request_service: RequestService = Depends(get_request_service),
) -> List[ParticipationRequestResponse]:
    return [ParticipationRequestResponse.from_model(r) for r in request_service.list_for_user(user_id)]


@router.patch(
    "/{request_id}/cancel",
    response_model=ParticipationRequestResponse,
    summary="Cancel a request",
)
def cancel_request(
    user_id: int,
    request_id: int,
    request_service: RequestService = Depends(get_request_service),
) -> ParticipationRequestResponse:
    request = request_service.cancel_request(requester_id=user_id, request_id=request_id)
    return ParticipationRequestResponse.from_model(request)
