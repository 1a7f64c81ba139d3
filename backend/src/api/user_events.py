"""
Initiator API endpoints for a user's own events.

Provides:
- Create an event (starts PENDING)
- List and get the user's events
- Edit an event that is not yet published (optionally changing its state)
- List and moderate the participation requests of an event

Endpoints are plain functions: services use a synchronous session and run
in FastAPI's threadpool.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from backend.src.api.dependencies import get_event_service, get_request_service
from backend.src.schemas.event import EventFullResponse, EventShortResponse, EventUpdate, NewEvent
from backend.src.schemas.request import (
    ParticipationRequestResponse,
    RequestStatusUpdate,
    RequestStatusUpdateResult,
)
from backend.src.services.event_service import EventService
from backend.src.services.request_service import RequestService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/users/{user_id}/events",
    tags=["Events (initiator)"],
)


@router.post(
    "",
    response_model=EventFullResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
)
def create_event(
    user_id: int,
    new_event: NewEvent,
    event_service: EventService = Depends(get_event_service),
) -> EventFullResponse:
    """
    Create a new event initiated by the user.

    The event starts PENDING with no confirmed requests and no views; its
    date must be at least two hours ahead.
    """
    event = event_service.create(user_id=user_id, **new_event.to_service_kwargs())
    return EventFullResponse.model_validate(event)


@router.get(
    "",
    response_model=List[EventShortResponse],
    summary="List the user's events",
)
def list_user_events(
    user_id: int,
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    event_service: EventService = Depends(get_event_service),
) -> List[EventShortResponse]:
    events = event_service.list_by_initiator(user_id, from_=from_, size=size)
    return [EventShortResponse.model_validate(e) for e in events]


@router.get(
    "/{event_id}",
    response_model=EventFullResponse,
    summary="Get one of the user's events",
)
def get_user_event(
    user_id: int,
    event_id: int,
    event_service: EventService = Depends(get_event_service),
) -> EventFullResponse:
    event = event_service.get_by_initiator(user_id, event_id)
    return EventFullResponse.model_validate(event)


@router.patch(
    "/{event_id}",
    response_model=EventFullResponse,
    summary="Edit an unpublished event",
)
def update_user_event(
    user_id: int,
    event_id: int,
    update: EventUpdate,
    event_service: EventService = Depends(get_event_service),
) -> EventFullResponse:
    """
    Partially update an event as its initiator.

    Rejected with 409 once the event is published. ``stateAction`` may be
    SEND_TO_REVIEW, CANCEL_REVIEW (or REJECT_EVENT) or PUBLISH_EVENT.
    """
    event = event_service.update_by_initiator(user_id, event_id, **update.to_service_kwargs())
    return EventFullResponse.model_validate(event)


@router.get(
    "/{event_id}/requests",
    response_model=List[ParticipationRequestResponse],
    summary="List participation requests of an event",
)
def list_event_requests(
    user_id: int,
    event_id: int,
    request_service: RequestService = Depends(get_request_service),
) -> List[ParticipationRequestResponse]:
    requests = request_service.list_for_event(user_id, event_id)
    return [ParticipationRequestResponse.from_model(r) for r in requests]


@router.patch(
    "/{event_id}/requests",
    response_model=RequestStatusUpdateResult,
    summary="Confirm or reject pending requests",
)
def decide_event_requests(
    user_id: int,
    event_id: int,
    decision: RequestStatusUpdate,
    request_service: RequestService = Depends(get_request_service),
) -> RequestStatusUpdateResult:
    """
    Confirm or reject a batch of PENDING requests, in the order given.

    Confirmations beyond the remaining places are turned into rejections.
    Any request that is not PENDING fails the whole batch with 409.

    Example:
        PATCH /users/1/events/5/requests
        {"requestIds": [3, 4, 5], "status": "CONFIRMED"}

        Response:
        {"confirmedRequests": [...], "rejectedRequests": [...]}
    """
    result = request_service.decide_batch(
        initiator_id=user_id,
        event_id=event_id,
        request_ids=decision.request_ids,
        status=decision.status,
    )
    logger.info(
        f"Batch decision on event {event_id} by user {user_id}",
        extra={"event_id": event_id, "requested": len(decision.request_ids)},
    )
    return RequestStatusUpdateResult(
        confirmed_requests=[
            ParticipationRequestResponse.from_model(r) for r in result["confirmed_requests"]
        ],
        rejected_requests=[
            ParticipationRequestResponse.from_model(r) for r in result["rejected_requests"]
        ],
    )
