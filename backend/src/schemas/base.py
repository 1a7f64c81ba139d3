"""
Shared pydantic configuration for API schemas.

The public JSON contract uses camelCase field names (``eventDate``,
``participantLimit``, ...) and the fixed ``YYYY-MM-DD HH:MM:SS`` timestamp
format. Python code uses snake_case attributes; aliases bridge the two.
"""

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from backend.src.utils.formatting import DATE_FORMAT, format_timestamp


class ApiModel(BaseModel):
    """Base schema: camelCase aliases, accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def parse_wire_datetime(value: Any) -> Any:
    """
    Parse wire-format timestamp strings; other values are left to pydantic.

    Raises:
        ValueError: If a string does not match ``YYYY-MM-DD HH:MM:SS``
    """
    if isinstance(value, str):
        return datetime.strptime(value.strip(), DATE_FORMAT)
    return value


def serialize_wire_datetime(value: Optional[datetime]) -> Optional[str]:
    return format_timestamp(value)


# datetime that reads and writes the wire format
WireDatetime = Annotated[
    datetime,
    BeforeValidator(parse_wire_datetime),
    PlainSerializer(serialize_wire_datetime, return_type=Optional[str]),
]
