"""
Unit tests for ViewService.
"""

import httpx
import pytest

from backend.src.clients.stats_client import StatsClient, StatsClientError, StatsRow
from backend.src.services.view_service import START_HISTORY, ViewService, event_uri


@pytest.fixture
def view_service(test_db_session, mock_stats_client, test_settings):
    return ViewService(test_db_session, mock_stats_client, settings=test_settings)


class TestRecordView:

    def test_record_view_sends_hit(self, view_service, mock_stats_client):
        assert view_service.record_view("/events/4", "10.0.0.1") is True

        kwargs = mock_stats_client.add_hit.call_args.kwargs
        assert kwargs["app"] == "ewm-service"
        assert kwargs["uri"] == "/events/4"
        assert kwargs["ip"] == "10.0.0.1"

    def test_record_view_failure_is_reported(self, view_service, mock_stats_client):
        mock_stats_client.add_hit.side_effect = StatsClientError("rejected", status_code=500)

        assert view_service.record_view("/events/4", "10.0.0.1") is False


class TestRefreshViews:

    def test_single_batched_query(self, view_service, mock_stats_client, sample_event):
        events = [sample_event(), sample_event()]

        view_service.refresh_views(events)

        mock_stats_client.find_stats.assert_called_once()
        kwargs = mock_stats_client.find_stats.call_args.kwargs
        assert kwargs["start"] == START_HISTORY
        assert kwargs["uris"] == [event_uri(e.id) for e in events]
        assert kwargs["unique"] is True

    def test_events_without_rows_get_zero(
        self, view_service, mock_stats_client, sample_event, test_db_session
    ):
        event = sample_event(views=9)

        view_service.refresh_views([event])

        test_db_session.expire_all()
        assert event.views == 0

    def test_first_row_per_uri_wins(self, view_service, mock_stats_client, sample_event):
        event = sample_event()
        mock_stats_client.find_stats.return_value = [
            StatsRow(app="ewm-service", uri=event_uri(event.id), hits=5),
            StatsRow(app="legacy-app", uri=event_uri(event.id), hits=1),
        ]

        view_service.refresh_views([event])

        assert event.views == 5

    def test_empty_list_skips_statistics(self, view_service, mock_stats_client):
        assert view_service.refresh_views([]) == []
        mock_stats_client.find_stats.assert_not_called()

    def test_failure_leaves_views(self, view_service, mock_stats_client, sample_event):
        event = sample_event(views=6)
        mock_stats_client.find_stats.side_effect = StatsClientError("bad gateway", status_code=502)

        view_service.refresh_views([event])

        assert event.views == 6

    def test_malformed_stats_body_leaves_views(
        self, test_db_session, test_settings, sample_event
    ):
        event = sample_event(views=4)
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, text="<html>proxy</html>")
        )

        with StatsClient("http://stats.test:9090", transport=transport) as client:
            service = ViewService(test_db_session, client, settings=test_settings)
            assert service.refresh_views([event]) == [event]

        assert event.views == 4
