"""
Statistics service HTTP client.

Records view hits and reads aggregated hit counts from the statistics
service (``POST /hit``, ``GET /stats``). Both calls are synchronous and use
the fixed ``YYYY-MM-DD HH:MM:SS`` timestamp format on the wire.
"""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Any, List, Optional, Sequence, Tuple

import httpx

from backend.src.config.settings import get_settings
from backend.src.utils.formatting import format_timestamp
from backend.src.utils.logging_config import get_logger


logger = get_logger("stats")


# ============================================================================
# Constants
# ============================================================================

DEFAULT_TIMEOUT = 5.0  # seconds
USER_AGENT = "ewm-service-stats-client/1.0"


# ============================================================================
# Exceptions
# ============================================================================


class StatsClientError(Exception):
    """Base exception for statistics service errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StatsConnectionError(StatsClientError):
    """Raised when the statistics service cannot be reached."""

    pass


# ============================================================================
# Result rows
# ============================================================================


@dataclass(frozen=True)
class StatsRow:
    """One aggregated row returned by ``GET /stats``."""

    app: str
    uri: str
    hits: int

    @classmethod
    def from_dict(cls, data: dict) -> "StatsRow":
        return cls(app=data["app"], uri=data["uri"], hits=int(data["hits"]))


# ============================================================================
# StatsClient Class
# ============================================================================


class StatsClient:
    """
    HTTP client for the statistics service.

    Attributes:
        server_url: Base URL of the statistics service
    """

    def __init__(
        self,
        server_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            server_url: Base URL of the statistics service
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            ValueError: If server_url is empty
        """
        if not server_url:
            raise ValueError("server_url is required")

        self._server_url = server_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._server_url,
            headers={
                "User-Agent": USER_AGENT,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def server_url(self) -> str:
        """Get the server URL."""
        return self._server_url

    # -------------------------------------------------------------------------
    # Hits
    # -------------------------------------------------------------------------

    def add_hit(self, app: str, uri: str, ip: str, timestamp: datetime) -> None:
        """
        Record one hit.

        Args:
            app: Name of the calling application
            uri: Requested URI, e.g. ``/events/12``
            ip: Caller address
            timestamp: Moment of the request

        Raises:
            StatsConnectionError: If the service cannot be reached
            StatsClientError: If the service does not answer 201
        """
        payload = {
            "app": app,
            "uri": uri,
            "ip": ip,
            "timestamp": format_timestamp(timestamp),
        }

        response = self._send("POST", "/hit", json=payload)

        if response.status_code != 201:
            raise StatsClientError(
                f"Recording hit failed with status {response.status_code}",
                status_code=response.status_code,
            )

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def find_stats(
        self,
        start: datetime,
        end: datetime,
        uris: Optional[Sequence[str]] = None,
        unique: bool = False,
    ) -> List[StatsRow]:
        """
        Get hit counts per (app, uri) over [start, end].

        Args:
            start: Window start
            end: Window end
            uris: URIs to count; all URIs when None or empty
            unique: Count distinct ip addresses instead of raw hits

        Returns:
            Rows ordered by hits descending; empty when nothing matched

        Raises:
            StatsConnectionError: If the service cannot be reached
            StatsClientError: If the service rejects the query or the body is malformed
        """
        params: List[Tuple[str, Any]] = [
            ("start", format_timestamp(start)),
            ("end", format_timestamp(end)),
            ("unique", "true" if unique else "false"),
        ]
        for uri in uris or []:
            params.append(("uris", uri))

        response = self._send("GET", "/stats", params=params)

        if response.status_code != 200:
            raise StatsClientError(
                f"Stats query failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            return [StatsRow.from_dict(row) for row in payload]
        except (ValueError, KeyError, TypeError) as e:
            raise StatsClientError(f"Malformed stats response: {e!r}", status_code=200)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise StatsConnectionError(f"Statistics service timed out: {e}")
        except httpx.HTTPError as e:
            raise StatsConnectionError(f"Statistics service request failed: {e}")

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "StatsClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


@lru_cache()
def get_stats_client() -> StatsClient:
    """
    Get the shared StatsClient built from application settings.

    Used as a FastAPI dependency; the instance is closed on shutdown.
    """
    settings = get_settings()
    logger.info(f"Statistics service at {settings.stats_server_url}")
    return StatsClient(settings.stats_server_url, timeout=settings.stats_timeout)
