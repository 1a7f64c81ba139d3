"""
Hit service: records hits and answers aggregate hit-count queries.

Design:
- A stats row is one (app, uri) pair with its hit count over the window
- unique=True counts distinct ip addresses instead of hits
- Rows are ordered by hit count, highest first
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, distinct
from sqlalchemy.orm import Session

from stats.src.models import Hit
from stats.src.schemas.hit import HitCreate, ViewStats


logger = logging.getLogger(__name__)


class StatsValidationError(Exception):
    """Raised when a stats query is malformed (e.g. start after end)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class HitService:
    """
    Service for hits.

    Usage:
        >>> service = HitService(db_session)
        >>> service.add_hit(HitCreate(app="ewm-service", uri="/events/1",
        ...                           ip="10.0.0.1", timestamp=datetime.utcnow()))
        >>> service.get_stats(start, end, uris=["/events/1"], unique=True)
    """

    def __init__(self, db: Session):
        self.db = db

    def add_hit(self, hit: HitCreate) -> Hit:
        """Store one hit."""
        record = Hit(app=hit.app, uri=hit.uri, ip=hit.ip, timestamp=hit.timestamp)
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except Exception:
            self.db.rollback()
            raise

        logger.debug(f"Recorded hit {record.uri} from {record.ip}")
        return record

    def get_stats(
        self,
        start: datetime,
        end: datetime,
        uris: Optional[List[str]] = None,
        unique: bool = False,
    ) -> List[ViewStats]:
        """
        Count hits per (app, uri) with timestamp in [start, end].

        Args:
            start: Window start (inclusive)
            end: Window end (inclusive)
            uris: Restrict to these URIs; all URIs when None or empty.
                Comma-separated entries are split.
            unique: Count distinct ip addresses

        Returns:
            ViewStats rows ordered by hits descending

        Raises:
            StatsValidationError: If start is after end
        """
        if start > end:
            raise StatsValidationError("Start must not be after end")

        counter = func.count(distinct(Hit.ip)) if unique else func.count(Hit.id)
        hits = counter.label("hits")

        query = (
            self.db.query(Hit.app, Hit.uri, hits)
            .filter(Hit.timestamp >= start, Hit.timestamp <= end)
        )

        uri_list = [u.strip() for value in uris or [] for u in value.split(",") if u.strip()]
        if uri_list:
            query = query.filter(Hit.uri.in_(uri_list))

        rows = (
            query.group_by(Hit.app, Hit.uri)
            .order_by(hits.desc(), Hit.uri.asc())
            .all()
        )

        return [ViewStats(app=app, uri=uri, hits=count) for app, uri, count in rows]
