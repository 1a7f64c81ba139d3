"""
Caller identification for statistics hits.

Each public event read is reported to the statistics service as
(app, uri, ip, timestamp). The uri is the request path; the ip is taken from
proxy headers when present, since the API normally runs behind one.
"""

from typing import Optional

from fastapi import Request


UNKNOWN_IP = "unknown"


def _first_forwarded(value: Optional[str]) -> Optional[str]:
    # X-Forwarded-For: client, proxy1, proxy2
    if not value:
        return None
    first = value.split(",")[0].strip()
    return first or None


def get_client_ip(request: Request) -> str:
    """
    Address of the caller.

    Lookup order: first X-Forwarded-For entry, X-Real-IP, then the socket
    peer. Returns "unknown" when none is available (e.g. some test clients).
    """
    forwarded = _first_forwarded(request.headers.get("X-Forwarded-For"))
    if forwarded:
        return forwarded

    real_ip = (request.headers.get("X-Real-IP") or "").strip()
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_IP


def get_request_uri(request: Request) -> str:
    """Path of the request as recorded in statistics, e.g. ``/events/12``."""
    return request.url.path
