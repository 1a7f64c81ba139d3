"""
Timestamp formatting utilities.

Every timestamp exchanged with clients and with the statistics service uses
one fixed textual format: ``YYYY-MM-DD HH:MM:SS``.
"""

from datetime import datetime
from typing import Optional

from backend.src.services.exceptions import ValidationError


DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Convert a datetime to the wire format.

    Examples:
        >>> format_timestamp(datetime(2026, 3, 1, 10, 30, 45))
        '2026-03-01 10:30:45'
        >>> format_timestamp(None) is None
        True
    """
    if value is None:
        return None
    return value.strftime(DATE_FORMAT)


def parse_timestamp(value: Optional[str], field: Optional[str] = None) -> Optional[datetime]:
    """
    Parse a wire-format timestamp.

    Args:
        value: String in ``YYYY-MM-DD HH:MM:SS`` form, or None
        field: Name of the parameter being parsed, used in the error message

    Returns:
        Parsed datetime, or None when value is None or blank

    Raises:
        ValidationError: If the string does not match the format
    """
    if value is None or not value.strip():
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError:
        label = field or "timestamp"
        raise ValidationError(
            f"Invalid {label} '{value}': expected format YYYY-MM-DD HH:MM:SS",
            field=field
        )
