"""
Pydantic schemas for user API request/response validation.
"""

from pydantic import Field, field_validator

from backend.src.schemas.base import ApiModel


class UserCreate(ApiModel):
    """
    Schema for creating a user (admin API).

    Example:
        >>> UserCreate(name="Jane Doe", email="jane@example.com")
    """

    name: str = Field(..., min_length=2, max_length=250)
    email: str = Field(..., min_length=6, max_length=254)

    @field_validator("name", "email")
    @classmethod
    def validate_not_whitespace(cls, v: str) -> str:
        """Reject whitespace-only values."""
        if not v.strip():
            raise ValueError("Value cannot be empty or whitespace")
        return v.strip()


class UserResponse(ApiModel):
    """Full user representation."""

    id: int
    name: str
    email: str


class UserShortResponse(ApiModel):
    """User as embedded in event representations."""

    id: int
    name: str
