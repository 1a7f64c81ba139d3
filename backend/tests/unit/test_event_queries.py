"""
Unit tests for the admin and public event queries.
"""

import pytest
from datetime import datetime, timedelta

from backend.src.clients.stats_client import StatsConnectionError, StatsRow
from backend.src.models import EventState
from backend.src.services.event_service import EventService
from backend.src.services.exceptions import ValidationError
from backend.src.services.view_service import ViewService


@pytest.fixture
def view_service(test_db_session, mock_stats_client, test_settings):
    return ViewService(test_db_session, mock_stats_client, settings=test_settings)


@pytest.fixture
def event_service(test_db_session, view_service):
    """Create an EventService with a mocked statistics client."""
    return EventService(test_db_session, view_service=view_service)


def days(n):
    return datetime.utcnow() + timedelta(days=n)


class TestAdminQuery:

    def test_no_filters_returns_everything_by_id(self, event_service, sample_event):
        first = sample_event(state=EventState.PENDING)
        second = sample_event(state=EventState.PUBLISHED)
        third = sample_event(state=EventState.CANCELED)

        events = event_service.admin_query()

        assert [e.id for e in events] == [first.id, second.id, third.id]

    def test_filters_are_combined(self, event_service, sample_event, sample_user, sample_category):
        user = sample_user()
        category = sample_category()
        match = sample_event(initiator=user, category=category, state=EventState.PENDING)
        sample_event(initiator=user, category=category, state=EventState.PUBLISHED)
        sample_event(category=category, state=EventState.PENDING)

        events = event_service.admin_query(
            users=[user.id], states=["PENDING"], categories=[category.id]
        )

        assert [e.id for e in events] == [match.id]

    def test_date_range(self, event_service, sample_event):
        sample_event(event_date=days(1))
        inside = sample_event(event_date=days(5))
        sample_event(event_date=days(10))

        events = event_service.admin_query(range_start=days(3), range_end=days(7))

        assert [e.id for e in events] == [inside.id]

    def test_pagination(self, event_service, sample_event):
        ids = [sample_event().id for _ in range(5)]

        events = event_service.admin_query(from_=2, size=2)

        assert [e.id for e in events] == ids[2:4]

    def test_unknown_state_rejected(self, event_service):
        with pytest.raises(ValidationError) as exc_info:
            event_service.admin_query(states=["DRAFT"])

        assert "Unknown state" in exc_info.value.message

    def test_inverted_range_rejected(self, event_service):
        with pytest.raises(ValidationError):
            event_service.admin_query(range_start=days(5), range_end=days(1))


class TestPublicQuery:

    def test_only_published_future_events(self, event_service, sample_event):
        published = sample_event(state=EventState.PUBLISHED)
        sample_event(state=EventState.PENDING)
        sample_event(state=EventState.PUBLISHED, event_date=datetime.utcnow() - timedelta(days=1))

        events = event_service.public_query()

        assert [e.id for e in events] == [published.id]

    def test_text_matches_annotation_or_description(self, event_service, sample_event):
        by_annotation = sample_event(annotation="A rooftop CONCERT under the stars")
        by_description = sample_event(description="Bring your own blanket to the concert")
        sample_event()

        events = event_service.public_query(text="concert")

        assert sorted(e.id for e in events) == sorted([by_annotation.id, by_description.id])

    def test_paid_and_category_filters(self, event_service, sample_event, sample_category):
        category = sample_category()
        match = sample_event(category=category, paid=True)
        sample_event(category=category, paid=False)
        sample_event(paid=True)

        events = event_service.public_query(categories=[category.id], paid=True)

        assert [e.id for e in events] == [match.id]

    def test_only_available(self, event_service, sample_event):
        unlimited = sample_event(participant_limit=0, confirmed_requests=4)
        open_event = sample_event(participant_limit=3, confirmed_requests=2)
        sample_event(participant_limit=2, confirmed_requests=2)

        events = event_service.public_query(only_available=True)

        assert [e.id for e in events] == [unlimited.id, open_event.id]

    def test_sort_by_event_date(self, event_service, sample_event):
        later = sample_event(event_date=days(9))
        sooner = sample_event(event_date=days(2))

        events = event_service.public_query(sort="EVENT_DATE")

        assert [e.id for e in events] == [sooner.id, later.id]

    def test_views_come_from_statistics(self, event_service, sample_event, mock_stats_client):
        first = sample_event()
        second = sample_event()
        mock_stats_client.find_stats.return_value = [
            StatsRow(app="ewm-service", uri=f"/events/{second.id}", hits=7),
            StatsRow(app="ewm-service", uri=f"/events/{first.id}", hits=2),
        ]

        events = event_service.public_query(sort="VIEWS", uri="/events", ip="10.0.0.1")

        assert [(e.id, e.views) for e in events] == [(second.id, 7), (first.id, 2)]
        mock_stats_client.add_hit.assert_called_once()
        assert mock_stats_client.add_hit.call_args.kwargs["uri"] == "/events"
        assert mock_stats_client.add_hit.call_args.kwargs["ip"] == "10.0.0.1"
        assert mock_stats_client.find_stats.call_args.kwargs["unique"] is True

    def test_statistics_outage_keeps_stored_views(
        self, event_service, sample_event, mock_stats_client
    ):
        event = sample_event(views=4)
        mock_stats_client.add_hit.side_effect = StatsConnectionError("down")
        mock_stats_client.find_stats.side_effect = StatsConnectionError("down")

        events = event_service.public_query()

        assert [(e.id, e.views) for e in events] == [(event.id, 4)]

    def test_combined_filters_with_views(self, event_service, sample_event, mock_stats_client):
        match = sample_event(
            annotation="Open-air concert by the river", paid=True,
            participant_limit=10, confirmed_requests=3,
        )
        sample_event(annotation="Open-air concert by the river", paid=False)
        sample_event(
            annotation="Sold-out concert in the old hall", paid=True,
            participant_limit=2, confirmed_requests=2,
        )
        sample_event(
            annotation="Concert for reviewers only", paid=True, state=EventState.PENDING
        )
        mock_stats_client.find_stats.return_value = [
            StatsRow(app="ewm-service", uri=f"/events/{match.id}", hits=11),
        ]

        events = event_service.public_query(text="concert", paid=True, only_available=True)

        assert [(e.id, e.views) for e in events] == [(match.id, 11)]

    def test_unknown_sort_rejected(self, event_service):
        with pytest.raises(ValidationError):
            event_service.public_query(sort="POPULARITY")

    def test_inverted_range_rejected(self, event_service):
        with pytest.raises(ValidationError):
            event_service.public_query(range_start=days(5), range_end=days(1))


class TestGetPublished:

    def test_get_published_records_view(self, event_service, sample_event, mock_stats_client):
        event = sample_event()
        mock_stats_client.find_stats.return_value = [
            StatsRow(app="ewm-service", uri=f"/events/{event.id}", hits=3),
        ]

        result = event_service.get_published(event.id, ip="10.0.0.9")

        assert result.views == 3
        assert mock_stats_client.add_hit.call_args.kwargs["uri"] == f"/events/{event.id}"

    def test_unpublished_is_not_found(self, event_service, sample_event):
        from backend.src.services.exceptions import NotFoundError

        event = sample_event(state=EventState.PENDING)

        with pytest.raises(NotFoundError):
            event_service.get_published(event.id)
