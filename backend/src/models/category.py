"""
Category model for event classification.

Categories group events (Concerts, Exhibitions, Sports, ...). Every event
references exactly one category; a category cannot be deleted while events
still reference it.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from backend.src.models import Base


class Category(Base):
    """
    Event category model.

    Attributes:
        id: Primary key
        name: Category name (unique)

    Relationships:
        events: Events in this category (one-to-many, RESTRICT on delete)
    """

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False, index=True)

    events = relationship(
        "Event",
        back_populates="category",
        lazy="dynamic"
    )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<Category(id={self.id}, name='{self.name}')>"

    def __str__(self) -> str:
        """Human-readable string representation."""
        return self.name
