"""
Offset/limit helpers for "from"/"size" listings.

Listings take an item offset ``from`` and a page length ``size``. The offset is
turned into a page index with integer division, so a ``from`` that is not a
multiple of ``size`` is rounded down to the start of its page.
"""

from typing import Tuple

from backend.src.services.exceptions import ValidationError


def page_bounds(from_: int, size: int) -> Tuple[int, int]:
    """
    Convert ``from``/``size`` into SQL offset and limit.

    Examples:
        >>> page_bounds(0, 10)
        (0, 10)
        >>> page_bounds(20, 10)
        (20, 10)
        >>> page_bounds(15, 10)
        (10, 10)

    Raises:
        ValidationError: If from_ is negative or size is not positive
    """
    if from_ < 0:
        raise ValidationError("Parameter 'from' must not be negative", field="from")
    if size <= 0:
        raise ValidationError("Parameter 'size' must be positive", field="size")

    page_index = from_ // size
    return page_index * size, size
