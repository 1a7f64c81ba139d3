"""
Custom exceptions for service layer.

Provides specific exception types for business logic errors
that can be translated to appropriate HTTP responses:
- NotFoundError -> 404
- ConflictError -> 409
- ValidationError -> 400
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for service layer errors."""

    reason = "Service error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    reason = "The required object was not found."

    def __init__(self, resource: str, identifier: Any):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with id={identifier} was not found")


class ConflictError(ServiceError):
    """Raised when an operation violates a business rule for the current state."""

    reason = "For the requested operation the conditions are not met."


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    reason = "Incorrectly made request."

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)
