"""
Participation request service.

Governs creation, moderation (batch confirm/reject) and cancellation of
participation requests against an event's capacity and moderation policy.

Design:
- One request per (requester, event), whatever its status
- The event's confirmed_requests counter is recounted from the requests table
  inside the same commit as every status change that can affect it
- Capacity-changing sequences for one event run under that event's lock and,
  on PostgreSQL, a row lock on the event (SELECT ... FOR UPDATE)
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session, lazyload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func

from backend.src.config.settings import AppSettings, get_settings
from backend.src.models import Event, EventState, ParticipationRequest, RequestStatus
from backend.src.utils.event_locks import EventLockRegistry, get_event_lock_registry
from backend.src.utils.logging_config import get_logger
from backend.src.services.exceptions import NotFoundError, ConflictError, ValidationError
from backend.src.services.event_service import EventService
from backend.src.services.user_service import UserService


logger = get_logger("services")

DECISION_STATUSES = (RequestStatus.CONFIRMED, RequestStatus.REJECTED)


class RequestService:
    """
    Service for participation requests.

    Usage:
        >>> service = RequestService(db_session)
        >>> request = service.create_request(requester_id=2, event_id=5)
        >>> result = service.decide_batch(
        ...     initiator_id=1, event_id=5,
        ...     request_ids=[request.id], status=RequestStatus.CONFIRMED
        ... )
        >>> [r.id for r in result["confirmed_requests"]]
        [1]
    """

    def __init__(
        self,
        db: Session,
        settings: Optional[AppSettings] = None,
        locks: Optional[EventLockRegistry] = None,
    ):
        """
        Initialize request service.

        Args:
            db: SQLAlchemy database session
            settings: Application settings (ownership policy)
            locks: Per-event lock registry (process-wide singleton by default)
        """
        self.db = db
        self.settings = settings or get_settings()
        self.locks = locks or get_event_lock_registry()
        self.users = UserService(db)
        self.events = EventService(db, locks=self.locks)
        # Check if using SQLite (doesn't support FOR UPDATE)
        self._is_sqlite = self._check_is_sqlite()

    def _check_is_sqlite(self) -> bool:
        """Check if the database backend is SQLite."""
        try:
            return self.db.bind.dialect.name == "sqlite"
        except Exception:
            return False

    # =========================================================================
    # Requester operations
    # =========================================================================

    def create_request(self, requester_id: int, event_id: int) -> ParticipationRequest:
        """
        Submit a participation request.

        Checks, in order: requester and event exist; the event is not full;
        the requester is not the initiator; no earlier request exists; the
        event is PUBLISHED. Events without moderation or without a limit
        confirm the request immediately.

        Args:
            requester_id: Requesting user ID
            event_id: Event ID

        Returns:
            Created ParticipationRequest (PENDING or CONFIRMED)

        Raises:
            NotFoundError: If requester or event not found
            ConflictError: If any participation rule is violated
        """
        self.users.get_by_id(requester_id)

        with self.locks.hold(event_id):
            event = self._get_event_for_update(event_id)

            if not event.has_unlimited_capacity and event.confirmed_requests >= event.participant_limit:
                raise ConflictError(
                    f"Event {event_id} has reached its participant limit of {event.participant_limit}"
                )
            if event.initiator_id == requester_id:
                raise ConflictError(
                    f"Initiator {requester_id} cannot request participation in their own event"
                )
            existing = (
                self.db.query(ParticipationRequest)
                .filter(
                    ParticipationRequest.requester_id == requester_id,
                    ParticipationRequest.event_id == event_id,
                )
                .first()
            )
            if existing:
                raise ConflictError(
                    f"User {requester_id} has already requested participation in event {event_id}"
                )
            if event.state != EventState.PUBLISHED:
                raise ConflictError(
                    f"Event {event_id} has not been published, participation cannot be requested"
                )

            status = RequestStatus.PENDING
            if not event.needs_moderation:
                status = RequestStatus.CONFIRMED

            try:
                request = ParticipationRequest(
                    requester_id=requester_id,
                    event_id=event_id,
                    created=datetime.utcnow(),
                    status=status,
                )
                self.db.add(request)
                if status == RequestStatus.CONFIRMED:
                    self._recount_confirmed(event)
                self.db.commit()
                self.db.refresh(request)
            except IntegrityError as e:
                self.db.rollback()
                logger.error(f"Failed to create request for event {event_id}: {e}")
                raise ConflictError(
                    f"User {requester_id} has already requested participation in event {event_id}"
                )
            except Exception:
                self.db.rollback()
                raise

        logger.info(
            f"User {requester_id} requested event {event_id}: {request.status.value}",
            extra={"request_id": request.id, "event_id": event_id},
        )
        return request

    def cancel_request(self, requester_id: int, request_id: int) -> ParticipationRequest:
        """
        Cancel a participation request.

        With ownership enforcement on (the default), a request that belongs to
        another user is reported as not found. Cancelling a CONFIRMED request
        frees its place.

        Raises:
            NotFoundError: If user or request not found
        """
        self.users.get_by_id(requester_id)
        request = self._get_request(request_id)

        if self.settings.enforce_request_ownership and request.requester_id != requester_id:
            raise NotFoundError("Request", request_id)

        with self.locks.hold(request.event_id):
            event = self._get_event_for_update(request.event_id)
            self.db.refresh(request)
            was_confirmed = request.status == RequestStatus.CONFIRMED

            try:
                request.status = RequestStatus.CANCELED
                if was_confirmed:
                    self._recount_confirmed(event)
                self.db.commit()
                self.db.refresh(request)
            except Exception:
                self.db.rollback()
                raise

        logger.info(f"User {requester_id} canceled request {request_id}")
        return request

    def list_for_user(self, user_id: int) -> List[ParticipationRequest]:
        """
        List a user's own participation requests, ordered by id.

        Raises:
            NotFoundError: If user not found
        """
        self.users.get_by_id(user_id)
        return (
            self.db.query(ParticipationRequest)
            .filter(ParticipationRequest.requester_id == user_id)
            .order_by(ParticipationRequest.id.asc())
            .all()
        )

    # =========================================================================
    # Initiator operations
    # =========================================================================

    def list_for_event(self, initiator_id: int, event_id: int) -> List[ParticipationRequest]:
        """
        List the requests submitted to an event, for its initiator.

        Raises:
            NotFoundError: If user or event not found
            ConflictError: If the caller is not the initiator
        """
        self.users.get_by_id(initiator_id)
        event = self.events.get_by_id(event_id)
        self._ensure_initiator(event, initiator_id)

        return (
            self.db.query(ParticipationRequest)
            .filter(ParticipationRequest.event_id == event_id)
            .order_by(ParticipationRequest.id.asc())
            .all()
        )

    def decide_batch(
        self,
        initiator_id: int,
        event_id: int,
        request_ids: Sequence[int],
        status: RequestStatus,
    ) -> Dict[str, List[ParticipationRequest]]:
        """
        Confirm or reject a batch of PENDING requests.

        Requests are processed in the order given. Confirmations beyond the
        remaining places become rejections. Every request must be PENDING;
        a single non-PENDING request fails the whole batch and nothing is
        saved. Events without moderation or without a limit are left alone
        and two empty lists are returned.

        Args:
            initiator_id: Caller ID (must be the initiator)
            event_id: Event ID
            request_ids: Requests to decide, in processing order
            status: CONFIRMED or REJECTED

        Returns:
            {"confirmed_requests": [...], "rejected_requests": [...]}

        Raises:
            NotFoundError: If user, event or any request not found
            ConflictError: If caller is not the initiator, the event is full,
                a request belongs to another event, or is not PENDING
            ValidationError: If status is not CONFIRMED or REJECTED
        """
        if status not in DECISION_STATUSES:
            raise ValidationError(
                f"Status must be CONFIRMED or REJECTED, got {status.value}", field="status"
            )

        self.users.get_by_id(initiator_id)
        result: Dict[str, List[ParticipationRequest]] = {
            "confirmed_requests": [],
            "rejected_requests": [],
        }

        with self.locks.hold(event_id):
            event = self._get_event_for_update(event_id)
            self._ensure_initiator(event, initiator_id)

            if not event.needs_moderation:
                return result

            if event.confirmed_requests >= event.participant_limit:
                raise ConflictError(
                    f"Event {event_id} has reached its participant limit of {event.participant_limit}"
                )

            vacant = event.participant_limit - event.confirmed_requests

            try:
                for request_id in request_ids:
                    request = self._get_request(request_id)
                    if request.event_id != event_id:
                        raise ConflictError(
                            f"Request {request_id} does not belong to event {event_id}"
                        )
                    if request.status != RequestStatus.PENDING:
                        raise ConflictError(
                            f"Request {request_id} must have status PENDING, "
                            f"has {request.status.value}"
                        )

                    if status == RequestStatus.CONFIRMED and vacant > 0:
                        request.status = RequestStatus.CONFIRMED
                        self._recount_confirmed(event)
                        vacant -= 1
                        result["confirmed_requests"].append(request)
                    else:
                        request.status = RequestStatus.REJECTED
                        result["rejected_requests"].append(request)

                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

            for request in result["confirmed_requests"] + result["rejected_requests"]:
                self.db.refresh(request)

        logger.info(
            f"Decided {len(request_ids)} request(s) for event {event_id}: "
            f"{len(result['confirmed_requests'])} confirmed, "
            f"{len(result['rejected_requests'])} rejected",
            extra={"event_id": event_id, "confirmed_requests": event.confirmed_requests},
        )
        return result

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_event_for_update(self, event_id: int) -> Event:
        """
        Load an event for a capacity change, row-locked on PostgreSQL.

        Raises:
            NotFoundError: If event not found
        """
        query = self.db.query(Event).filter(Event.id == event_id)

        # FOR UPDATE cannot be combined with outer joins; SQLite has no row locks
        if not self._is_sqlite:
            query = query.options(lazyload('*')).with_for_update()

        event = query.populate_existing().first()
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    def _get_request(self, request_id: int) -> ParticipationRequest:
        request = (
            self.db.query(ParticipationRequest)
            .filter(ParticipationRequest.id == request_id)
            .first()
        )
        if not request:
            raise NotFoundError("Request", request_id)
        return request

    def _ensure_initiator(self, event: Event, user_id: int) -> None:
        if event.initiator_id != user_id:
            raise ConflictError(
                f"User {user_id} is not the initiator of the event {event.id}"
            )

    def _recount_confirmed(self, event: Event) -> int:
        """Set confirmed_requests from the authoritative count of CONFIRMED requests."""
        self.db.flush()
        count = (
            self.db.query(func.count(ParticipationRequest.id))
            .filter(
                ParticipationRequest.event_id == event.id,
                ParticipationRequest.status == RequestStatus.CONFIRMED,
            )
            .scalar()
        )
        event.confirmed_requests = count
        return count
