"""
Pydantic schemas for event API request/response validation.

Provides data validation and serialization for:
- Event creation requests (NewEvent)
- Initiator and admin updates (EventUpdate)
- Full and short event representations

Design:
- camelCase JSON names, snake_case attributes
- Timestamps in the fixed ``YYYY-MM-DD HH:MM:SS`` format
- Updates are partial: every field is optional and None means "unchanged"
"""

from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from backend.src.models import EventState, StateAction
from backend.src.schemas.base import ApiModel, WireDatetime
from backend.src.schemas.category import CategoryResponse
from backend.src.schemas.user import UserShortResponse


# ============================================================================
# Location
# ============================================================================


class LocationSchema(ApiModel):
    """Latitude/longitude pair of an event."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


# ============================================================================
# Event Request Schemas
# ============================================================================


class NewEvent(ApiModel):
    """
    Schema for creating an event.

    Example:
        >>> NewEvent(
        ...     annotation="An evening of live jazz standards",
        ...     category=1,
        ...     description="Three sets of jazz standards with a guest trio",
        ...     eventDate="2030-05-01 19:00:00",
        ...     location={"lat": 55.75, "lon": 37.61},
        ...     title="Jazz night",
        ... )
    """

    annotation: str = Field(..., min_length=20, max_length=2000)
    category: int = Field(..., ge=1)
    description: str = Field(..., min_length=20, max_length=7000)
    event_date: WireDatetime
    location: LocationSchema
    paid: bool = False
    participant_limit: int = Field(default=0, ge=0)
    request_moderation: bool = True
    title: str = Field(..., min_length=3, max_length=120)

    @field_validator("annotation", "description", "title")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only text."""
        if not v.strip():
            raise ValueError("Value cannot be empty or whitespace")
        return v

    def to_service_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for EventService.create."""
        return {
            "annotation": self.annotation,
            "category_id": self.category,
            "description": self.description,
            "event_date": self.event_date,
            "location": self.location.model_dump(),
            "paid": self.paid,
            "participant_limit": self.participant_limit,
            "request_moderation": self.request_moderation,
            "title": self.title,
        }


class EventUpdate(ApiModel):
    """
    Schema for partial event updates (initiator and admin).

    Every field is optional; absent or null fields are left unchanged and
    blank strings are ignored. ``stateAction`` requests a state change.
    """

    annotation: Optional[str] = Field(default=None, max_length=2000)
    category: Optional[int] = Field(default=None, ge=1)
    description: Optional[str] = Field(default=None, max_length=7000)
    event_date: Optional[WireDatetime] = None
    location: Optional[LocationSchema] = None
    paid: Optional[bool] = None
    participant_limit: Optional[int] = Field(default=None, ge=0)
    request_moderation: Optional[bool] = None
    state_action: Optional[StateAction] = None
    title: Optional[str] = Field(default=None, max_length=120)

    @field_validator("annotation", "description")
    @classmethod
    def validate_long_text(cls, v: Optional[str]) -> Optional[str]:
        """Non-blank long texts need at least 20 characters."""
        if v is not None and v.strip() and len(v) < 20:
            raise ValueError("Value must be at least 20 characters")
        return v

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        """Non-blank titles need at least 3 characters."""
        if v is not None and v.strip() and len(v) < 3:
            raise ValueError("Title must be at least 3 characters")
        return v

    def to_service_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for EventService.update_by_*; None means unchanged."""
        return {
            "annotation": self.annotation,
            "category_id": self.category,
            "description": self.description,
            "event_date": self.event_date,
            "location": self.location.model_dump() if self.location else None,
            "paid": self.paid,
            "participant_limit": self.participant_limit,
            "request_moderation": self.request_moderation,
            "state_action": self.state_action,
            "title": self.title,
        }


# ============================================================================
# Event Response Schemas
# ============================================================================


class EventShortResponse(ApiModel):
    """Event as shown in listings."""

    id: int
    annotation: str
    category: CategoryResponse
    confirmed_requests: int
    event_date: WireDatetime
    initiator: UserShortResponse
    paid: bool
    title: str
    views: int


class EventFullResponse(EventShortResponse):
    """Event with all details, moderation data and location."""

    created_on: WireDatetime
    description: str
    location: LocationSchema
    participant_limit: int
    published_on: Optional[WireDatetime] = None
    request_moderation: bool
    state: EventState
