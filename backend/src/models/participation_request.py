"""
Participation request model.

A participation request is a user's application to join an event. There is
at most one request per (requester, event) pair; requests are never deleted,
only moved to CANCELED or REJECTED.
"""

import enum
from datetime import datetime

from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from backend.src.models import Base


class RequestStatus(enum.Enum):
    """
    Participation request status.

    State transitions:
    - PENDING -> CONFIRMED | REJECTED (initiator moderation)
    - PENDING | CONFIRMED -> CANCELED (requester)
    """
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"
    REJECTED = "REJECTED"


class ParticipationRequest(Base):
    """
    Participation request model.

    Attributes:
        id: Primary key
        requester_id: FK to the requesting User
        event_id: FK to the requested Event
        created: Submission timestamp
        status: Current status

    Constraints:
        - (requester_id, event_id) is unique

    Indexes:
        - event_id, status (for confirmed-count recomputation)
    """

    __tablename__ = "requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    requester_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    event_id = Column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False
    )
    created = Column(DateTime, default=datetime.utcnow, nullable=False)
    status = Column(
        Enum(RequestStatus, name="requeststatus"),
        default=RequestStatus.PENDING,
        nullable=False
    )

    requester = relationship("User")
    event = relationship("Event", back_populates="requests")

    __table_args__ = (
        UniqueConstraint("requester_id", "event_id", name="uq_requests_requester_event"),
        Index("idx_requests_event_status", "event_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<ParticipationRequest("
            f"id={self.id}, "
            f"requester={self.requester_id}, "
            f"event={self.event_id}, "
            f"status={self.status.value if self.status else None}"
            f")>"
        )
