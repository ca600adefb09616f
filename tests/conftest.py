from __future__ import annotations

import threading
from datetime import datetime, timezone

import pytest

from tracker.app.config.tracking import SessionTrackingConfiguration
from tracker.app.domain.models import AppInfo, DeviceInfo, OutgoingRequest, Session
from tracker.app.ports.http_transport import HttpTransportError

ENDPOINT = "https://sessions.example.com"
API_KEY = "a" * 32


class FakeResponse:
    """Implements TransportResponse; records how many times it was released."""

    def __init__(
        self,
        status_code: int = 202,
        status: str = "202 Accepted",
        *,
        raise_on_close: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.status = status
        self.close_calls = 0
        self._raise_on_close = raise_on_close

    def close(self) -> None:
        self.close_calls += 1
        if self._raise_on_close is not None:
            raise self._raise_on_close


class FakeTransport:
    """Implements HttpTransport for tests; records every request it is given."""

    def __init__(
        self,
        response: FakeResponse | None = None,
        *,
        raise_on_send: Exception | None = None,
    ) -> None:
        self.response = response or FakeResponse()
        self.requests: list[OutgoingRequest] = []
        self.closed = False
        self._raise_on_send = raise_on_send
        self._lock = threading.Lock()

    def send(self, request: OutgoingRequest) -> FakeResponse:
        with self._lock:
            self.requests.append(request)
        if self._raise_on_send is not None:
            raise self._raise_on_send
        return self.response

    def close(self) -> None:
        self.closed = True


class ConnectionRefused(HttpTransportError):
    pass


def make_session(index: int = 0) -> Session:
    return Session(
        id=f"session-{index}",
        started_at=datetime(2026, 1, 1, 12, index % 60, tzinfo=timezone.utc),
    )


@pytest.fixture()
def log_messages() -> list[str]:
    return []


@pytest.fixture()
def config(log_messages: list[str]) -> SessionTrackingConfiguration:
    return SessionTrackingConfiguration(
        endpoint=ENDPOINT,
        api_key=API_KEY,
        app=AppInfo(version="1.2.3", release_stage="staging"),
        device=DeviceInfo(hostname="web-1"),
        logf=log_messages.append,
    )


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()
