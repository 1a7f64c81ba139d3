"""
Shared FastAPI dependencies for the event-management API.

Builds the service objects each endpoint needs from the request's database
session, the shared statistics client and the application settings.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from backend.src.clients.stats_client import StatsClient, get_stats_client
from backend.src.config.settings import AppSettings, get_settings
from backend.src.db.database import get_db
from backend.src.services.category_service import CategoryService
from backend.src.services.event_service import EventService
from backend.src.services.request_service import RequestService
from backend.src.services.user_service import UserService
from backend.src.services.view_service import ViewService
from backend.src.utils.formatting import parse_timestamp


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Create UserService instance with database session."""
    return UserService(db=db)


def get_category_service(db: Session = Depends(get_db)) -> CategoryService:
    """Create CategoryService instance with database session."""
    return CategoryService(db=db)


def get_view_service(
    db: Session = Depends(get_db),
    stats_client: StatsClient = Depends(get_stats_client),
    settings: AppSettings = Depends(get_settings),
) -> ViewService:
    """Create ViewService bound to the shared statistics client."""
    return ViewService(db=db, stats_client=stats_client, settings=settings)


def get_event_service(
    db: Session = Depends(get_db),
    view_service: ViewService = Depends(get_view_service),
) -> EventService:
    """Create EventService with view reconciliation."""
    return EventService(db=db, view_service=view_service)


def get_request_service(
    db: Session = Depends(get_db),
    settings: AppSettings = Depends(get_settings),
) -> RequestService:
    """Create RequestService with database session and settings."""
    return RequestService(db=db, settings=settings)


def parse_range(range_start: Optional[str], range_end: Optional[str]):
    """Parse rangeStart/rangeEnd query strings (ValidationError on bad format)."""
    start: Optional[datetime] = parse_timestamp(range_start, field="rangeStart")
    end: Optional[datetime] = parse_timestamp(range_end, field="rangeEnd")
    return start, end


def split_states(states: Optional[List[str]]) -> Optional[List[str]]:
    """Accept both ?states=A&states=B and ?states=A,B."""
    if not states:
        return states
    return [token for value in states for token in value.split(",") if token.strip()]
