"""
Pydantic schemas for hits and aggregated view statistics.

Timestamps use the fixed ``YYYY-MM-DD HH:MM:SS`` format.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator


DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class HitCreate(BaseModel):
    """
    One request to record.

    Example:
        >>> HitCreate(app="ewm-service", uri="/events/1", ip="10.0.0.1",
        ...           timestamp="2026-03-01 10:30:45")
    """

    app: str = Field(..., min_length=1, max_length=255)
    uri: str = Field(..., min_length=1, max_length=512)
    ip: str = Field(..., min_length=1, max_length=64)
    timestamp: datetime

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        """Accept the fixed wire format."""
        if isinstance(v, str):
            return datetime.strptime(v.strip(), DATE_FORMAT)
        return v

    @field_serializer("timestamp")
    def serialize_timestamp(self, v: datetime) -> str:
        return v.strftime(DATE_FORMAT)


class ViewStats(BaseModel):
    """Hit count for one (app, uri) pair."""

    app: str
    uri: str
    hits: int
