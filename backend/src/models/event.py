"""
Event model for publishable activities.

Events are created by an initiator in PENDING state, moderated by an admin
(PUBLISHED or CANCELED) and joined by users through participation requests.

Design Rationale:
- Location is an owned value (1:1, delete-orphan), replaced wholesale on update
- confirmed_requests is a cached count of CONFIRMED requests; it is only ever
  written by recounting the requests table inside the same commit
- views is a cached count materialized from the statistics service on read
- participant_limit == 0 means unlimited capacity
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, Enum,
    ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import relationship

from backend.src.models import Base


class EventState(enum.Enum):
    """Publication state of an event."""
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    CANCELED = "CANCELED"


class StateAction(enum.Enum):
    """Requested state change carried by an event update."""
    PUBLISH_EVENT = "PUBLISH_EVENT"
    REJECT_EVENT = "REJECT_EVENT"
    CANCEL_REVIEW = "CANCEL_REVIEW"
    SEND_TO_REVIEW = "SEND_TO_REVIEW"


class Event(Base):
    """
    Event model.

    Attributes:
        id: Primary key (also used in the public URI /events/{id})
        annotation: Short summary
        description: Full description
        title: Event title
        category_id: FK to Category
        initiator_id: FK to User who created the event
        location_id: FK to the owned Location
        event_date: When the event takes place
        created_on: Creation timestamp
        published_on: Publication timestamp (NULL until published)
        paid: Whether participation is paid
        participant_limit: Maximum confirmed participants (0 = unlimited)
        request_moderation: Whether requests need initiator confirmation
        confirmed_requests: Cached count of CONFIRMED requests
        views: Cached unique-ip view count from the statistics service
        state: Publication state (PENDING, PUBLISHED, CANCELED)

    Relationships:
        category: Event category (many-to-one, RESTRICT on delete)
        initiator: Creating user (many-to-one, CASCADE on delete)
        location: Owned location (one-to-one, delete-orphan)
        requests: Participation requests (one-to-many)

    Indexes:
        - initiator_id (for "my events" listings)
        - state, event_date (for public listings)
    """

    __tablename__ = "events"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Core fields
    annotation = Column(String(2000), nullable=False)
    description = Column(Text, nullable=False)
    title = Column(String(120), nullable=False)

    # References
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    initiator_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    location_id = Column(
        Integer,
        ForeignKey("locations.id"),
        nullable=False
    )

    # Time fields
    event_date = Column(DateTime, nullable=False)
    created_on = Column(DateTime, default=datetime.utcnow, nullable=False)
    published_on = Column(DateTime, nullable=True)

    # Participation settings
    paid = Column(Boolean, default=False, nullable=False)
    participant_limit = Column(Integer, default=0, nullable=False)
    request_moderation = Column(Boolean, default=True, nullable=False)

    # Cached counters
    confirmed_requests = Column(Integer, default=0, nullable=False)
    views = Column(Integer, default=0, nullable=False)

    # Publication state
    state = Column(
        Enum(EventState, name="eventstate"),
        default=EventState.PENDING,
        nullable=False
    )

    # Relationships
    category = relationship("Category", back_populates="events")
    initiator = relationship("User")
    location = relationship(
        "Location",
        cascade="all, delete-orphan",
        single_parent=True,
    )
    requests = relationship(
        "ParticipationRequest",
        back_populates="event",
        lazy="dynamic"
    )

    __table_args__ = (
        CheckConstraint("participant_limit >= 0", name="ck_events_participant_limit"),
        CheckConstraint("confirmed_requests >= 0", name="ck_events_confirmed_requests"),
        Index("idx_events_state_date", "state", "event_date"),
    )

    @property
    def has_unlimited_capacity(self) -> bool:
        """True when the event accepts any number of participants."""
        return self.participant_limit == 0

    @property
    def is_full(self) -> bool:
        """True when a limited event has no vacant places left."""
        return (
            not self.has_unlimited_capacity
            and self.confirmed_requests >= self.participant_limit
        )

    @property
    def needs_moderation(self) -> bool:
        """True when requests must be confirmed by the initiator."""
        return bool(self.request_moderation) and not self.has_unlimited_capacity

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Event("
            f"id={self.id}, "
            f"title='{self.title}', "
            f"state={self.state.value if self.state else None}, "
            f"confirmed={self.confirmed_requests}/{self.participant_limit}"
            f")>"
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"{self.title} - {self.event_date}"
