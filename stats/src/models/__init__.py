"""
SQLAlchemy models for the statistics service.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()


from stats.src.models.hit import Hit  # noqa: E402

__all__ = ["Base", "Hit"]
