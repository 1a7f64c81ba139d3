"""
Pydantic schemas for API request/response validation.

This module exports all schema classes for use in API endpoints.
"""

from backend.src.schemas.base import ApiModel, WireDatetime
from backend.src.schemas.user import UserCreate, UserResponse, UserShortResponse
from backend.src.schemas.category import CategoryCreate, CategoryResponse
from backend.src.schemas.event import (
    LocationSchema,
    NewEvent,
    EventUpdate,
    EventShortResponse,
    EventFullResponse,
)
from backend.src.schemas.request import (
    ParticipationRequestResponse,
    RequestStatusUpdate,
    RequestStatusUpdateResult,
)
from backend.src.schemas.error import ApiErrorResponse

__all__ = [
    "ApiModel",
    "WireDatetime",
    "UserCreate",
    "UserResponse",
    "UserShortResponse",
    "CategoryCreate",
    "CategoryResponse",
    "LocationSchema",
    "NewEvent",
    "EventUpdate",
    "EventShortResponse",
    "EventFullResponse",
    "ParticipationRequestResponse",
    "RequestStatusUpdate",
    "RequestStatusUpdateResult",
    "ApiErrorResponse",
]
