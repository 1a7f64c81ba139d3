"""
Unit tests for StatsClient.

The underlying httpx client is patched; no network access is made.
"""

import pytest
from datetime import datetime
from unittest.mock import MagicMock, patch

import httpx

from backend.src.clients.stats_client import (
    StatsClient,
    StatsClientError,
    StatsConnectionError,
    StatsRow,
)


def make_response(status_code, json_data=None):
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    response.json.return_value = json_data
    return response


@pytest.fixture
def stats_client():
    client = StatsClient("http://stats.test:9090/")
    yield client
    client.close()


class TestStatsClientInit:

    def test_trailing_slash_stripped(self, stats_client):
        assert stats_client.server_url == "http://stats.test:9090"

    def test_empty_url_rejected(self):
        with pytest.raises(ValueError):
            StatsClient("")


class TestAddHit:

    def test_posts_wire_format(self, stats_client):
        with patch.object(stats_client, "_client") as mock_http:
            mock_http.request.return_value = make_response(201)

            stats_client.add_hit(
                app="ewm-service",
                uri="/events/1",
                ip="10.0.0.1",
                timestamp=datetime(2026, 3, 1, 10, 30, 45),
            )

        method, path = mock_http.request.call_args.args
        assert (method, path) == ("POST", "/hit")
        assert mock_http.request.call_args.kwargs["json"] == {
            "app": "ewm-service",
            "uri": "/events/1",
            "ip": "10.0.0.1",
            "timestamp": "2026-03-01 10:30:45",
        }

    def test_unexpected_status(self, stats_client):
        with patch.object(stats_client, "_client") as mock_http:
            mock_http.request.return_value = make_response(500)

            with pytest.raises(StatsClientError) as exc_info:
                stats_client.add_hit("ewm-service", "/events/1", "10.0.0.1", datetime.utcnow())

        assert exc_info.value.status_code == 500

    def test_timeout_maps_to_connection_error(self, stats_client):
        with patch.object(stats_client, "_client") as mock_http:
            mock_http.request.side_effect = httpx.ReadTimeout("timed out")

            with pytest.raises(StatsConnectionError):
                stats_client.add_hit("ewm-service", "/events/1", "10.0.0.1", datetime.utcnow())


class TestFindStats:

    def test_query_parameters_and_rows(self, stats_client):
        with patch.object(stats_client, "_client") as mock_http:
            mock_http.request.return_value = make_response(200, [
                {"app": "ewm-service", "uri": "/events/1", "hits": 3},
            ])

            rows = stats_client.find_stats(
                start=datetime(1970, 1, 1),
                end=datetime(2026, 3, 1, 10, 0, 0),
                uris=["/events/1", "/events/2"],
                unique=True,
            )

        assert rows == [StatsRow(app="ewm-service", uri="/events/1", hits=3)]
        assert mock_http.request.call_args.kwargs["params"] == [
            ("start", "1970-01-01 00:00:00"),
            ("end", "2026-03-01 10:00:00"),
            ("unique", "true"),
            ("uris", "/events/1"),
            ("uris", "/events/2"),
        ]

    def test_connect_error(self, stats_client):
        with patch.object(stats_client, "_client") as mock_http:
            mock_http.request.side_effect = httpx.ConnectError("refused")

            with pytest.raises(StatsConnectionError):
                stats_client.find_stats(datetime(1970, 1, 1), datetime.utcnow())

    def test_bad_request(self, stats_client):
        with patch.object(stats_client, "_client") as mock_http:
            mock_http.request.return_value = make_response(400)

            with pytest.raises(StatsClientError):
                stats_client.find_stats(datetime(2026, 1, 2), datetime(2026, 1, 1))


def client_answering(status_code, **response_kwargs):
    def handler(request):
        return httpx.Response(status_code, **response_kwargs)

    return StatsClient("http://stats.test:9090", transport=httpx.MockTransport(handler))


class TestMalformedResponses:

    def test_non_json_body(self):
        with client_answering(200, text="<html>proxy</html>") as client:
            with pytest.raises(StatsClientError):
                client.find_stats(datetime(1970, 1, 1), datetime.utcnow())

    def test_row_missing_fields(self):
        with client_answering(200, json=[{"uri": "/events/1"}]) as client:
            with pytest.raises(StatsClientError):
                client.find_stats(datetime(1970, 1, 1), datetime.utcnow())

    def test_body_not_a_list_of_rows(self):
        with client_answering(200, json={"hits": 3}) as client:
            with pytest.raises(StatsClientError):
                client.find_stats(datetime(1970, 1, 1), datetime.utcnow())

    def test_decoding_error_maps_to_connection_error(self, stats_client):
        with patch.object(stats_client, "_client") as mock_http:
            mock_http.request.side_effect = httpx.DecodingError("bad gzip")

            with pytest.raises(StatsConnectionError):
                stats_client.find_stats(datetime(1970, 1, 1), datetime.utcnow())
