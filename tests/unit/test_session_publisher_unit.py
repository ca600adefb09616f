"""Unit tests for HttpSessionPublisher success, skip and failure paths."""
from __future__ import annotations

import json
import threading
import time

import pytest

from tests.conftest import API_KEY, ENDPOINT, ConnectionRefused, FakeResponse, FakeTransport, make_session
from tracker.app.application.session_publisher import HttpSessionPublisher
from tracker.app.config.tracking import SessionTrackingConfiguration
from tracker.app.core.headers import prefixed_headers
from tracker.app.domain.errors import (
    EncodingError,
    PublishError,
    PublishErrorKind,
    RequestConstructionError,
    TransportError,
    UnexpectedStatusError,
)
from tracker.app.domain.models import Session


def test_disabled_endpoint_returns_without_network_call(transport):
    messages: list[str] = []
    config = SessionTrackingConfiguration(endpoint="", api_key=API_KEY, logf=messages.append)
    publisher = HttpSessionPublisher(config, transport)

    publisher.publish([make_session(i) for i in range(3)])
    publisher.publish([])

    assert transport.requests == []
    # Only the one-off warning from the configuration itself.
    assert len(messages) == 1


def test_accepted_response_is_success_and_body_holds_ordered_sessions(config, transport):
    sessions = [make_session(i) for i in range(5)]
    publisher = HttpSessionPublisher(config, transport)

    publisher.publish(sessions)

    assert len(transport.requests) == 1
    request = transport.requests[0]
    assert request.method == "POST"
    assert request.url == ENDPOINT
    body = json.loads(request.body)
    assert body["version"] == "1.0"
    assert [s["id"] for s in body["sessions"]] == [s.id for s in sessions]
    assert body["sessions"][0]["startedAt"] == "2026-01-01T12:00:00Z"
    assert body["app"] == {"version": "1.2.3", "releaseStage": "staging"}
    assert body["device"] == {"hostname": "web-1"}
    assert body["notifier"]["name"]
    assert transport.response.close_calls == 1


def test_empty_batch_still_sends_request(config, transport):
    HttpSessionPublisher(config, transport).publish([])

    assert len(transport.requests) == 1
    assert json.loads(transport.requests[0].body)["sessions"] == []


@pytest.mark.parametrize("batch_size", [0, 1, 10])
def test_headers_are_exactly_those_derived_from_api_key_and_version(config, transport, batch_size):
    HttpSessionPublisher(config, transport).publish([make_session(i) for i in range(batch_size)])

    sent = transport.requests[0].headers
    assert dict(sent) == prefixed_headers(API_KEY, "1.0")
    assert len(sent) == len(prefixed_headers(API_KEY, "1.0"))


def test_server_error_raises_unexpected_status_only(config):
    response = FakeResponse(500, "500 Internal Server Error")
    transport = FakeTransport(response)

    with pytest.raises(PublishError) as exc_info:
        HttpSessionPublisher(config, transport).publish([make_session()])

    err = exc_info.value
    assert type(err) is UnexpectedStatusError
    assert err.kind is PublishErrorKind.UNEXPECTED_STATUS
    assert err.status_code == 500
    assert "500 Internal Server Error" in str(err)
    assert response.close_calls == 1


def test_ok_status_other_than_accepted_is_a_failure(config):
    transport = FakeTransport(FakeResponse(200, "200 OK"))

    with pytest.raises(UnexpectedStatusError):
        HttpSessionPublisher(config, transport).publish([make_session()])


def test_transport_error_is_wrapped_and_lock_released(config):
    cause = ConnectionRefused("connection refused")
    failing = FakeTransport(raise_on_send=cause)

    with pytest.raises(TransportError) as exc_info:
        HttpSessionPublisher(config, failing).publish([make_session()])

    assert exc_info.value.cause is cause
    assert exc_info.value.__cause__ is cause
    assert exc_info.value.kind is PublishErrorKind.TRANSPORT
    assert config.lock.locked() is False

    working = FakeTransport()
    HttpSessionPublisher(config, working).publish([make_session()])
    assert len(working.requests) == 1


def test_unserializable_session_raises_encoding_error_without_sending(config, transport):
    class BrokenSession(Session):
        def to_dict(self):
            return {"id": self.id, "startedAt": object()}

    broken = BrokenSession(id="broken", started_at=make_session().started_at)

    with pytest.raises(EncodingError) as exc_info:
        HttpSessionPublisher(config, transport).publish([broken])

    assert isinstance(exc_info.value.cause, TypeError)
    assert transport.requests == []
    assert config.lock.locked() is False


@pytest.mark.parametrize("endpoint", ["not a url", "ftp://sessions.example.com", "https://", "http://host:99999"])
def test_malformed_endpoint_raises_request_construction_error(config, transport, endpoint):
    config.update(endpoint=endpoint)

    with pytest.raises(RequestConstructionError):
        HttpSessionPublisher(config, transport).publish([make_session()])

    assert transport.requests == []


def test_release_failure_is_logged_not_raised(config, log_messages):
    response = FakeResponse(raise_on_close=OSError("socket already closed"))
    transport = FakeTransport(response)

    HttpSessionPublisher(config, transport).publish([make_session()])

    assert response.close_calls == 1
    assert log_messages == ["socket already closed"]


def test_release_failure_does_not_mask_unexpected_status(config, log_messages):
    response = FakeResponse(503, "503 Service Unavailable", raise_on_close=OSError("boom"))

    with pytest.raises(UnexpectedStatusError):
        HttpSessionPublisher(config, FakeTransport(response)).publish([make_session()])

    assert log_messages == ["boom"]


def test_concurrent_publishers_never_observe_torn_configuration(config):
    """Each request must carry an endpoint/api_key pair written by the same update."""
    transport = FakeTransport()
    publisher = HttpSessionPublisher(config, transport)
    config.update(endpoint="https://h0.example.com", api_key="key-0")
    stop = threading.Event()
    errors: list[BaseException] = []

    def writer() -> None:
        i = 0
        while not stop.is_set():
            i += 1
            config.update(endpoint=f"https://h{i}.example.com", api_key=f"key-{i}")
            time.sleep(0)

    def reader() -> None:
        try:
            for _ in range(50):
                publisher.publish([make_session()])
        except BaseException as exc:  # surfaced below
            errors.append(exc)

    writer_thread = threading.Thread(target=writer)
    readers = [threading.Thread(target=reader) for _ in range(8)]
    writer_thread.start()
    for t in readers:
        t.start()
    for t in readers:
        t.join()
    stop.set()
    writer_thread.join()

    assert errors == []
    assert len(transport.requests) == 8 * 50
    for request in transport.requests:
        host_index = request.url.removeprefix("https://h").removesuffix(".example.com")
        assert dict(request.headers)["Tracker-Api-Key"] == f"key-{host_index}"
