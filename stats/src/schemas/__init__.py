"""
Pydantic schemas for the statistics service API.
"""

from stats.src.schemas.hit import DATE_FORMAT, HitCreate, ViewStats

__all__ = ["DATE_FORMAT", "HitCreate", "ViewStats"]
