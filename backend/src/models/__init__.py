"""
SQLAlchemy models for the event-management service.

This module provides the declarative base class and imports all models
to ensure they are registered with SQLAlchemy's metadata.
"""

from sqlalchemy.orm import declarative_base

# Create the declarative base class
# All models will inherit from this Base class
Base = declarative_base()


# Import all models here so they are registered with Base.metadata
# This is required for Alembic autogenerate to detect models
from backend.src.models.user import User
from backend.src.models.category import Category
from backend.src.models.location import Location
from backend.src.models.event import Event, EventState, StateAction
from backend.src.models.participation_request import ParticipationRequest, RequestStatus

# Export Base and all models
__all__ = [
    "Base",
    "User",
    "Category",
    "Location",
    "Event",
    "EventState",
    "StateAction",
    "ParticipationRequest",
    "RequestStatus",
]
