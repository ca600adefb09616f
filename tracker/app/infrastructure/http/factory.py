"""HTTP transport factory: builds HttpTransport from settings (no provider logic in composition)."""
from __future__ import annotations

import httpx

from tracker.app.config.settings import Settings
from tracker.app.infrastructure.http.httpx_transport import HttpxTransport
from tracker.app.ports.http_transport import HttpTransport, RequestTimeout


def create_http_transport(settings: Settings) -> HttpTransport:
    """Build a transport from settings. Timeouts are applied per-request by the adapter."""
    timeout = RequestTimeout(
        connect_seconds=settings.http_connect_timeout_seconds,
        read_seconds=settings.http_read_timeout_seconds,
    )
    return HttpxTransport(httpx.Client(), timeout)
