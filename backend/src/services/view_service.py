"""
View-count reconciliation against the statistics service.

Public event reads record a hit for the requested URI and then refresh the
cached ``views`` counter of every returned event from the statistics service
(unique ip addresses over the whole history of ``/events/{id}``).

Both calls are best effort: a statistics outage is logged and the read goes
on with the views already stored on the events. Refreshing a page of events
is a single multi-URI query.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from backend.src.clients.stats_client import StatsClient, StatsClientError
from backend.src.config.settings import AppSettings, get_settings
from backend.src.models import Event
from backend.src.utils.logging_config import get_logger


logger = get_logger("stats")

# Lower bound of the statistics window
START_HISTORY = datetime(1970, 1, 1, 0, 0, 0)


def event_uri(event_id: int) -> str:
    """Public URI of an event as recorded by the statistics service."""
    return f"/events/{event_id}"


class ViewService:
    """
    Records page views and materializes event view counters.

    Usage:
        >>> views = ViewService(db_session, stats_client)
        >>> views.record_view("/events/12", "10.0.0.1")
        >>> views.refresh_views([event])
    """

    def __init__(
        self,
        db: Session,
        stats_client: StatsClient,
        settings: Optional[AppSettings] = None,
    ):
        self.db = db
        self.stats_client = stats_client
        self.settings = settings or get_settings()

    def record_view(self, uri: str, ip: str) -> bool:
        """
        Send one hit for a page view.

        Returns:
            True if the statistics service accepted the hit
        """
        try:
            self.stats_client.add_hit(
                app=self.settings.stats_app_name,
                uri=uri,
                ip=ip,
                timestamp=datetime.utcnow(),
            )
            return True
        except StatsClientError as e:
            logger.warning(
                f"Failed to record hit for {uri}: {e}",
                extra={"uri": uri, "status_code": e.status_code},
            )
            return False

    def refresh_views(self, events: List[Event]) -> List[Event]:
        """
        Set each event's views to its unique-ip hit count and persist.

        Events with no statistics row get 0. When the statistics service
        fails, the stored counters are left untouched.

        Returns:
            The same events, refreshed in place
        """
        if not events:
            return events

        uris = [event_uri(event.id) for event in events]
        try:
            rows = self.stats_client.find_stats(
                start=START_HISTORY,
                end=datetime.utcnow(),
                uris=uris,
                unique=True,
            )
        except StatsClientError as e:
            logger.warning(
                f"Failed to refresh views for {len(events)} event(s): {e}",
                extra={"status_code": e.status_code},
            )
            return events

        # Rows come ordered by hits desc; keep the first row per uri
        hits_by_uri: Dict[str, int] = {}
        for row in rows:
            hits_by_uri.setdefault(row.uri, row.hits)

        for event in events:
            event.views = hits_by_uri.get(event_uri(event.id), 0)

        self.db.commit()
        for event in events:
            self.db.refresh(event)

        logger.debug(f"Refreshed views for {len(events)} event(s)")
        return events
