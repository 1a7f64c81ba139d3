"""
Error body returned by every failed API call.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from backend.src.utils.formatting import format_timestamp


class ApiErrorResponse(BaseModel):
    """
    Example:
        {
            "status": "NOT_FOUND",
            "reason": "The required object was not found.",
            "message": "Event with id=12 was not found",
            "timestamp": "2026-03-01 10:30:45"
        }
    """

    status: str
    reason: str
    message: str
    timestamp: str = Field(default_factory=lambda: format_timestamp(datetime.utcnow()))

    @classmethod
    def build(cls, status: str, reason: str, message: Optional[str]) -> "ApiErrorResponse":
        return cls(status=status, reason=reason, message=message or reason)
