"""
User model for event initiators and participants.

Users are referenced (never owned) by events they initiate and by the
participation requests they submit. Users are looked up by id only.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime

from backend.src.models import Base


class User(Base):
    """
    Platform user.

    Attributes:
        id: Primary key
        name: Display name
        email: Contact email (globally unique)
        created_at: Creation timestamp

    Constraints:
        - email must be unique
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(250), nullable=False)
    email = Column(String(254), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"<User(id={self.id}, email='{self.email}')>"

    def __str__(self) -> str:
        """Human-readable string representation."""
        return self.name
