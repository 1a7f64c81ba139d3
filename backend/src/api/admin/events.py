"""
Admin events API endpoints.

Provides:
- Search all events by initiator, state, category and date range
- Moderate an event (publish or reject) and edit its fields
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from backend.src.api.dependencies import get_event_service, parse_range, split_states
from backend.src.schemas.event import EventFullResponse, EventUpdate
from backend.src.services.event_service import EventService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/admin/events",
    tags=["Admin"],
)


@router.get(
    "",
    response_model=List[EventFullResponse],
    summary="Search events",
)
def search_events(
    users: Optional[List[int]] = Query(None),
    states: Optional[List[str]] = Query(None, description="PENDING, PUBLISHED, CANCELED"),
    categories: Optional[List[int]] = Query(None),
    range_start: Optional[str] = Query(None, alias="rangeStart"),
    range_end: Optional[str] = Query(None, alias="rangeEnd"),
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    event_service: EventService = Depends(get_event_service),
) -> List[EventFullResponse]:
    """
    Search events in any state. Omitted filters are not applied.

    Unknown state names and rangeStart after rangeEnd are rejected with 400.
    """
    start, end = parse_range(range_start, range_end)
    events = event_service.admin_query(
        users=users,
        states=split_states(states),
        categories=categories,
        range_start=start,
        range_end=end,
        from_=from_,
        size=size,
    )
    return [EventFullResponse.model_validate(e) for e in events]


@router.patch(
    "/{event_id}",
    response_model=EventFullResponse,
    summary="Moderate or edit an event",
)
def update_event(
    event_id: int,
    update: EventUpdate,
    event_service: EventService = Depends(get_event_service),
) -> EventFullResponse:
    """
    Publish (PUBLISH_EVENT) or reject (REJECT_EVENT) a PENDING event and
    apply any other provided fields.

    Moderating an event that is no longer PENDING is rejected with 409.
    """
    event = event_service.update_by_admin(event_id, **update.to_service_kwargs())
    logger.info(f"Admin updated event {event_id}: state={event.state.value}")
    return EventFullResponse.model_validate(event)
