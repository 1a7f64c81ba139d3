"""
Public events API endpoints.

Provides:
- Search published events (text, categories, paid, date range, availability)
- Get one published event

Every call records a hit with the statistics service and returns events whose
``views`` were refreshed from it. A statistics outage does not fail the call.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from backend.src.api.dependencies import get_event_service, parse_range
from backend.src.schemas.event import EventFullResponse, EventShortResponse
from backend.src.services.event_service import EventService
from backend.src.utils.client_ip import get_client_ip, get_request_uri
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/events",
    tags=["Events (public)"],
)


@router.get(
    "",
    response_model=List[EventShortResponse],
    summary="Search published events",
)
def search_events(
    request: Request,
    text: Optional[str] = Query(None, description="Matched against annotation and description"),
    categories: Optional[List[int]] = Query(None),
    paid: Optional[bool] = Query(None),
    range_start: Optional[str] = Query(None, alias="rangeStart"),
    range_end: Optional[str] = Query(None, alias="rangeEnd"),
    only_available: bool = Query(False, alias="onlyAvailable"),
    sort: Optional[str] = Query(None, description="EVENT_DATE or VIEWS"),
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    event_service: EventService = Depends(get_event_service),
) -> List[EventShortResponse]:
    """
    Search published events.

    Without rangeStart/rangeEnd only upcoming events are returned.

    Example:
        GET /events?text=concert&paid=true&onlyAvailable=true&sort=VIEWS
    """
    start, end = parse_range(range_start, range_end)
    events = event_service.public_query(
        text=text,
        categories=categories,
        paid=paid,
        range_start=start,
        range_end=end,
        only_available=only_available,
        sort=sort,
        from_=from_,
        size=size,
        uri=get_request_uri(request),
        ip=get_client_ip(request),
    )
    logger.info(f"Public search returned {len(events)} event(s)")
    return [EventShortResponse.model_validate(e) for e in events]


@router.get(
    "/{event_id}",
    response_model=EventFullResponse,
    summary="Get a published event",
)
def get_event(
    event_id: int,
    request: Request,
    event_service: EventService = Depends(get_event_service),
) -> EventFullResponse:
    """Get a published event; unpublished events are reported as not found."""
    event = event_service.get_published(
        event_id,
        uri=get_request_uri(request),
        ip=get_client_ip(request),
    )
    return EventFullResponse.model_validate(event)
