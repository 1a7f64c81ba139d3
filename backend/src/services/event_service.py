"""
Event service for managing events and their publication workflow.

Provides business logic for creating events, editing them as their initiator,
moderating them as an admin, and the admin and public listings.

Design:
- Events start PENDING; state changes go through the transition table in
  event_state (initiator and admin paths differ)
- Updates are partial: absent (None) fields are left untouched and blank
  strings are ignored
- Location is owned by the event and replaced wholesale on update
- A participant_limit change is checked against the confirmed count under
  the same per-event lock (and PostgreSQL row lock) as request decisions
- Public reads only ever see PUBLISHED events and refresh their view counters
  from the statistics service
"""

from contextlib import nullcontext
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload, lazyload
from sqlalchemy import or_

from backend.src.models import Event, EventState, Location, StateAction
from backend.src.utils.event_locks import EventLockRegistry, get_event_lock_registry
from backend.src.utils.logging_config import get_logger
from backend.src.utils.pagination import page_bounds
from backend.src.services.exceptions import NotFoundError, ValidationError, ConflictError
from backend.src.services.category_service import CategoryService
from backend.src.services.user_service import UserService
from backend.src.services.event_state import Actor, next_state
from backend.src.services.view_service import ViewService


logger = get_logger("services")

# Minimum distance between "now" and the event date
MIN_LEAD_TIME = timedelta(hours=2)

SORT_EVENT_DATE = "EVENT_DATE"
SORT_VIEWS = "VIEWS"
SORT_OPTIONS = (SORT_EVENT_DATE, SORT_VIEWS)

# Fields an update may carry besides state_action
PATCH_FIELDS = (
    "annotation",
    "category_id",
    "description",
    "event_date",
    "location",
    "paid",
    "participant_limit",
    "request_moderation",
    "title",
)
_TEXT_FIELDS = ("annotation", "description", "title")


class EventService:
    """
    Service for managing events.

    Handles:
    - Creation and initiator-side listing/editing
    - Admin moderation (publish/reject) and admin search
    - Public search and single-event reads with view reconciliation

    Usage:
        >>> service = EventService(db_session, view_service=ViewService(db_session, client))
        >>> event = service.create(user_id=1, title="Jazz night", ...)
        >>> service.update_by_admin(event.id, state_action=StateAction.PUBLISH_EVENT)
    """

    def __init__(
        self,
        db: Session,
        view_service: Optional[ViewService] = None,
        locks: Optional[EventLockRegistry] = None,
    ):
        """
        Initialize event service.

        Args:
            db: SQLAlchemy database session
            view_service: View reconciliation for public reads (optional;
                without it public reads neither record hits nor refresh views)
            locks: Per-event lock registry (process-wide singleton by default)
        """
        self.db = db
        self.view_service = view_service
        self.locks = locks or get_event_lock_registry()
        self.users = UserService(db)
        self.categories = CategoryService(db)
        self._is_sqlite = self._check_is_sqlite()

    def _check_is_sqlite(self) -> bool:
        """Check if the database backend is SQLite."""
        try:
            return self.db.bind.dialect.name == "sqlite"
        except Exception:
            return False

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_by_id(self, event_id: int) -> Event:
        """
        Get an event by ID.

        Raises:
            NotFoundError: If event not found
        """
        event = self.db.query(Event).filter(Event.id == event_id).first()
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    # =========================================================================
    # Initiator operations
    # =========================================================================

    def create(
        self,
        user_id: int,
        annotation: str,
        category_id: int,
        description: str,
        event_date: datetime,
        location: Dict[str, float],
        title: str,
        paid: bool = False,
        participant_limit: int = 0,
        request_moderation: bool = True,
    ) -> Event:
        """
        Create a new PENDING event.

        Args:
            user_id: Initiator ID
            annotation: Short summary
            category_id: Category ID
            description: Full description
            event_date: When the event takes place
            location: {"lat": ..., "lon": ...}
            title: Event title
            paid: Whether participation is paid
            participant_limit: Maximum confirmed participants (0 = unlimited)
            request_moderation: Whether requests need confirmation

        Returns:
            Created Event instance

        Raises:
            NotFoundError: If user or category not found
            ValidationError: If event_date is too close or limit is negative
        """
        initiator = self.users.get_by_id(user_id)
        category = self.categories.get_by_id(category_id)

        self._validate_event_date(event_date)
        if participant_limit < 0:
            raise ValidationError(
                "Participant limit cannot be negative", field="participant_limit"
            )

        # Location is stored before the event that owns it
        event_location = self._save_location(location)

        event = Event(
            annotation=annotation,
            description=description,
            title=title,
            category=category,
            initiator=initiator,
            location=event_location,
            event_date=event_date,
            created_on=datetime.utcnow(),
            paid=paid,
            participant_limit=participant_limit,
            request_moderation=request_moderation,
            confirmed_requests=0,
            views=0,
            state=EventState.PENDING,
        )

        try:
            self.db.add(event)
            self.db.commit()
            self.db.refresh(event)
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Created event {event.id} '{event.title}' by user {user_id}")
        return event

    def list_by_initiator(self, user_id: int, from_: int = 0, size: int = 10) -> List[Event]:
        """
        List events created by a user, ordered by id.

        Raises:
            NotFoundError: If user not found
        """
        self.users.get_by_id(user_id)
        offset, limit = page_bounds(from_, size)

        return (
            self.db.query(Event)
            .options(joinedload(Event.category), joinedload(Event.initiator))
            .filter(Event.initiator_id == user_id)
            .order_by(Event.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def get_by_initiator(self, user_id: int, event_id: int) -> Event:
        """
        Get one of a user's own events.

        Raises:
            NotFoundError: If the user, the event, or the pairing does not exist
        """
        self.users.get_by_id(user_id)
        event = self.get_by_id(event_id)
        if event.initiator_id != user_id:
            raise NotFoundError("Event", event_id)
        return event

    def update_by_initiator(self, user_id: int, event_id: int, **updates: Any) -> Event:
        """
        Edit an event as its initiator.

        Only allowed while the event is not PUBLISHED. A state_action in the
        update may publish, cancel or resubmit the event (see event_state).

        Args:
            user_id: Caller ID (must be the initiator)
            event_id: Event ID
            **updates: Patch fields (PATCH_FIELDS plus state_action)

        Returns:
            Updated Event instance

        Raises:
            NotFoundError: If user, event or new category not found
            ConflictError: If caller is not the initiator, the event is
                published, or the state action is not allowed
            ValidationError: If event_date is too close
        """
        self.users.get_by_id(user_id)

        with self._capacity_guard(event_id, updates):
            event = self._load_for_patch(event_id, updates)

            if event.initiator_id != user_id:
                raise ConflictError(
                    f"User {user_id} is not the initiator of the event {event_id}"
                )
            if event.state == EventState.PUBLISHED:
                raise ConflictError(
                    f"User {user_id} cannot update event {event_id} that has already been published"
                )

            return self._apply_patch(event, Actor.INITIATOR, updates)

    # =========================================================================
    # Admin operations
    # =========================================================================

    def update_by_admin(self, event_id: int, **updates: Any) -> Event:
        """
        Moderate and/or edit an event as an admin.

        PUBLISH_EVENT publishes a PENDING event and stamps published_on; any
        other state action rejects a PENDING event. Either on a non-PENDING
        event is a ConflictError.

        Raises:
            NotFoundError: If event or new category not found
            ConflictError: If the moderation action is not allowed
            ValidationError: If event_date is too close
        """
        with self._capacity_guard(event_id, updates):
            event = self._load_for_patch(event_id, updates)
            return self._apply_patch(event, Actor.ADMIN, updates)

    def admin_query(
        self,
        users: Optional[List[int]] = None,
        states: Optional[List[str]] = None,
        categories: Optional[List[int]] = None,
        range_start: Optional[datetime] = None,
        range_end: Optional[datetime] = None,
        from_: int = 0,
        size: int = 10,
    ) -> List[Event]:
        """
        Search all events for admins. Filters are AND-ed; omitted filters
        are unconstrained.

        Args:
            users: Initiator IDs
            states: State names (PENDING, PUBLISHED, CANCELED)
            categories: Category IDs
            range_start: Earliest event_date (inclusive)
            range_end: Latest event_date (inclusive)
            from_: Item offset
            size: Page length

        Returns:
            List of Event instances ordered by id

        Raises:
            ValidationError: If a state name is unknown or start > end
        """
        state_values = self._parse_states(states)
        self._validate_range(range_start, range_end)
        offset, limit = page_bounds(from_, size)

        query = self.db.query(Event).options(
            joinedload(Event.category),
            joinedload(Event.initiator),
            joinedload(Event.location),
        )

        if users:
            query = query.filter(Event.initiator_id.in_(users))
        if state_values:
            query = query.filter(Event.state.in_(state_values))
        if categories:
            query = query.filter(Event.category_id.in_(categories))
        if range_start:
            query = query.filter(Event.event_date >= range_start)
        if range_end:
            query = query.filter(Event.event_date <= range_end)

        return query.order_by(Event.id.asc()).offset(offset).limit(limit).all()

    # =========================================================================
    # Public operations
    # =========================================================================

    def public_query(
        self,
        text: Optional[str] = None,
        categories: Optional[List[int]] = None,
        paid: Optional[bool] = None,
        range_start: Optional[datetime] = None,
        range_end: Optional[datetime] = None,
        only_available: bool = False,
        sort: Optional[str] = None,
        from_: int = 0,
        size: int = 10,
        uri: str = "/events",
        ip: str = "unknown",
    ) -> List[Event]:
        """
        Search PUBLISHED events for the public listing.

        Records one hit for the listing itself, then refreshes the views of
        every returned event.

        Args:
            text: Case-insensitive match on annotation or description
            categories: Category IDs
            paid: Paid/free filter
            range_start: Earliest event_date; defaults to now when no range
                bound is given
            range_end: Latest event_date
            only_available: Keep only events with free places
            sort: EVENT_DATE (ascending) or VIEWS (descending)
            from_: Item offset
            size: Page length
            uri: Listing URI for the recorded hit
            ip: Caller address for the recorded hit

        Returns:
            List of Event instances

        Raises:
            ValidationError: If start > end or sort is unknown
        """
        self._validate_range(range_start, range_end)
        if sort is not None and sort not in SORT_OPTIONS:
            raise ValidationError(
                f"Unknown sort: {sort}. Valid options: {', '.join(SORT_OPTIONS)}",
                field="sort",
            )
        offset, limit = page_bounds(from_, size)

        if range_start is None and range_end is None:
            range_start = datetime.utcnow()

        query = self.db.query(Event).options(
            joinedload(Event.category),
            joinedload(Event.initiator),
        ).filter(Event.state == EventState.PUBLISHED)

        if text:
            pattern = f"%{text}%"
            query = query.filter(
                or_(Event.annotation.ilike(pattern), Event.description.ilike(pattern))
            )
        if categories:
            query = query.filter(Event.category_id.in_(categories))
        if paid is not None:
            query = query.filter(Event.paid == paid)
        if range_start:
            query = query.filter(Event.event_date >= range_start)
        if range_end:
            query = query.filter(Event.event_date <= range_end)
        if only_available:
            query = query.filter(
                or_(
                    Event.participant_limit == 0,
                    Event.confirmed_requests < Event.participant_limit,
                )
            )

        if sort == SORT_EVENT_DATE:
            query = query.order_by(Event.event_date.asc(), Event.id.asc())
        elif sort == SORT_VIEWS:
            query = query.order_by(Event.views.desc(), Event.id.asc())
        else:
            query = query.order_by(Event.id.asc())

        events = query.offset(offset).limit(limit).all()

        if self.view_service is not None:
            self.view_service.record_view(uri, ip)
            self.view_service.refresh_views(events)

        if sort == SORT_VIEWS:
            events = sorted(events, key=lambda e: (-e.views, e.id))

        return events

    def get_published(self, event_id: int, uri: Optional[str] = None, ip: str = "unknown") -> Event:
        """
        Get a PUBLISHED event for the public, recording the view.

        Raises:
            NotFoundError: If the event does not exist or is not published
        """
        event = self.get_by_id(event_id)
        if event.state != EventState.PUBLISHED:
            raise NotFoundError("Event", event_id)

        if self.view_service is not None:
            self.view_service.record_view(uri or f"/events/{event_id}", ip)
            self.view_service.refresh_views([event])

        return event

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _changes_capacity(updates: Dict[str, Any]) -> bool:
        return updates.get("participant_limit") is not None

    def _capacity_guard(self, event_id: int, updates: Dict[str, Any]):
        """Event lock when the patch changes participant_limit, else a no-op."""
        if self._changes_capacity(updates):
            return self.locks.hold(event_id)
        return nullcontext()

    def _load_for_patch(self, event_id: int, updates: Dict[str, Any]) -> Event:
        """
        Load the event to patch; row-locked on PostgreSQL for a limit change.

        Raises:
            NotFoundError: If event not found
        """
        if not self._changes_capacity(updates):
            return self.get_by_id(event_id)

        query = self.db.query(Event).filter(Event.id == event_id)
        # FOR UPDATE cannot be combined with outer joins; SQLite has no row locks
        if not self._is_sqlite:
            query = query.options(lazyload('*')).with_for_update()

        event = query.populate_existing().first()
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    def _apply_patch(self, event: Event, actor: Actor, updates: Dict[str, Any]) -> Event:
        """
        Apply a partial update and an optional state action, then commit.

        None values are skipped; blank strings are skipped for text fields.
        """
        unknown = set(updates) - set(PATCH_FIELDS) - {"state_action"}
        if unknown:
            raise ValidationError(f"Unknown event fields: {', '.join(sorted(unknown))}")

        state_action: Optional[StateAction] = updates.get("state_action")

        # Resolve everything that can fail before touching the event
        new_state = next_state(actor, event.state, state_action) if state_action else None

        category = None
        if updates.get("category_id") is not None:
            category = self.categories.get_by_id(updates["category_id"])

        if updates.get("event_date") is not None:
            self._validate_event_date(updates["event_date"])

        new_limit = updates.get("participant_limit")
        if new_limit is not None:
            if new_limit < 0:
                raise ValidationError(
                    "Participant limit cannot be negative", field="participant_limit"
                )
            if new_limit != 0 and new_limit < event.confirmed_requests:
                raise ConflictError(
                    f"Participant limit {new_limit} is below the "
                    f"{event.confirmed_requests} already confirmed request(s)"
                )

        try:
            for field in _TEXT_FIELDS:
                value = updates.get(field)
                if value is not None and value.strip():
                    setattr(event, field, value)

            for field in ("event_date", "paid", "participant_limit", "request_moderation"):
                if updates.get(field) is not None:
                    setattr(event, field, updates[field])

            if category is not None:
                event.category = category

            if updates.get("location") is not None:
                # Replaced wholesale; the old row is removed as an orphan
                event.location = self._save_location(updates["location"])

            if new_state is not None:
                previous = event.state
                event.state = new_state
                if new_state == EventState.PUBLISHED:
                    event.published_on = datetime.utcnow()
                logger.info(
                    f"Event {event.id} moved {previous.value} -> {new_state.value} "
                    f"by {actor.value.lower()} ({state_action.value})"
                )

            self.db.commit()
            self.db.refresh(event)
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Updated event {event.id} by {actor.value.lower()}")
        return event

    def _save_location(self, location: Dict[str, float]) -> Location:
        """Persist a new Location row and return it."""
        try:
            lat = float(location["lat"])
            lon = float(location["lon"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Location requires numeric lat and lon", field="location")

        event_location = Location(lat=lat, lon=lon)
        self.db.add(event_location)
        self.db.flush()
        return event_location

    def _validate_event_date(self, event_date: datetime) -> None:
        earliest = datetime.utcnow() + MIN_LEAD_TIME
        if event_date < earliest:
            raise ValidationError(
                f"Event date must be at least two hours from now: {event_date}",
                field="event_date",
            )

    def _validate_range(
        self,
        range_start: Optional[datetime],
        range_end: Optional[datetime],
    ) -> None:
        if range_start and range_end and range_start > range_end:
            raise ValidationError(
                "Range start must not be after range end", field="range_start"
            )

    def _parse_states(self, states: Optional[List[str]]) -> List[EventState]:
        values = []
        for token in states or []:
            try:
                values.append(EventState[token.strip().upper()])
            except KeyError:
                raise ValidationError(f"Unknown state: {token}", field="states")
        return values
