"""
Pydantic schemas for category API request/response validation.
"""

from pydantic import Field, field_validator

from backend.src.schemas.base import ApiModel


class CategoryCreate(ApiModel):
    """
    Schema for creating a new category.

    Required:
        name: Category name (unique, case-insensitive)
    """

    name: str = Field(..., min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name_not_whitespace(cls, v: str) -> str:
        """Ensure name is not just whitespace."""
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()

    model_config = {
        "json_schema_extra": {
            "example": {"name": "Concerts"}
        }
    }


class CategoryResponse(ApiModel):
    """Schema for category API responses."""

    id: int
    name: str
