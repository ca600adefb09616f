"""HTTP transport port: contract for performing one request/response exchange.

Domain and application code depend on this port; infrastructure (e.g. httpx)
implements it. Keeps the publisher free of infrastructure imports.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tracker.app.domain.models import OutgoingRequest


class HttpTransportError(Exception):
    """Base for transport failures (connection, protocol, etc.)."""


class HttpTransportTimeoutError(HttpTransportError):
    """Raised when the request times out."""


@runtime_checkable
class TransportResponse(Protocol):
    """Minimal view of an HTTP response holding releasable resources."""

    @property
    def status_code(self) -> int: ...

    @property
    def status(self) -> str:
        """Status text, e.g. "500 Internal Server Error"."""
        ...

    def close(self) -> None:
        """Release the body and the underlying connection."""
        ...


@dataclass(frozen=True)
class RequestTimeout:
    """Connect and read timeouts in seconds."""

    connect_seconds: float
    read_seconds: float


@runtime_checkable
class HttpTransport(Protocol):
    """Port: send a request synchronously. Implementations live in infrastructure."""

    def send(self, request: OutgoingRequest) -> TransportResponse:
        """Perform the request; raise HttpTransportTimeoutError or HttpTransportError on failure."""
        ...

    def close(self) -> None:
        """Release resources (e.g. connection pool). No-op allowed if nothing to close."""
        ...
