"""
Service layer for business logic.

Service classes live in their own modules (user_service, category_service,
event_service, request_service, view_service) and are imported from there.
The shared exception types are re-exported here; utils modules depend on
them, so this package must not import the service modules eagerly.
"""

from backend.src.services.exceptions import (
    ServiceError,
    NotFoundError,
    ConflictError,
    ValidationError,
)

__all__ = [
    "ServiceError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
]
