"""Session publisher: delivers one batch of sessions to the collector.

A publish call is a single linear attempt. It either returns (success) or
raises a PublishError subclass; retrying, dropping or re-queueing the batch is
left to the caller.
"""
from __future__ import annotations

from typing import Any, Protocol, Sequence

from loguru import logger

from tracker.app.config.tracking import SessionTrackingConfiguration
from tracker.app.constants import HTTP_STATUS_ACCEPTED, SESSION_PAYLOAD_VERSION
from tracker.app.core import SERVICE_NAME
from tracker.app.core.headers import prefixed_headers
from tracker.app.domain.errors import PublishError, TransportError, UnexpectedStatusError
from tracker.app.domain.models import Session, build_post_request
from tracker.app.domain.payload import encode_payload, make_session_payload
from tracker.app.ports.http_transport import HttpTransport, HttpTransportError, TransportResponse


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class SessionPublisher(Protocol):
    def publish(self, sessions: Sequence[Session]) -> None: ...


class HttpSessionPublisher:
    """Builds a payload from sessions and POSTs it to the configured sessions endpoint.

    The configuration lock is held from payload construction until the
    response has been handled, so endpoint and api_key are read as one
    consistent snapshot even while another thread reconfigures the client.
    """

    def __init__(self, config: SessionTrackingConfiguration, transport: HttpTransport) -> None:
        self._config = config
        self._transport = transport

    def publish(self, sessions: Sequence[Session]) -> None:
        if self._config.endpoint == "":
            # Session tracking is disabled, most likely because the notify
            # endpoint was changed without a sessions endpoint. The
            # configuration already warned once; stay quiet on every flush.
            _log("session_publish_skipped", reason="tracking_disabled", count=len(sessions))
            return

        with self._config.lock:
            try:
                self._publish_locked(sessions)
            except PublishError as exc:
                _log(
                    "session_publish_failed",
                    kind=exc.kind.value,
                    count=len(sessions),
                    error=str(exc),
                )
                raise
        _log("session_publish_success", count=len(sessions))

    def _publish_locked(self, sessions: Sequence[Session]) -> None:
        config = self._config
        payload = make_session_payload(sessions, config)
        body = encode_payload(payload)

        request = build_post_request(config.endpoint, body)
        for name, value in prefixed_headers(config.api_key, SESSION_PAYLOAD_VERSION).items():
            request.add_header(name, value)

        try:
            response = self._transport.send(request)
        except HttpTransportError as exc:
            raise TransportError(f"unable to deliver session: {exc}", cause=exc) from exc

        try:
            if response.status_code != HTTP_STATUS_ACCEPTED:
                raise UnexpectedStatusError(response.status_code, response.status)
        finally:
            self._release(response)

    def _release(self, response: TransportResponse) -> None:
        try:
            response.close()
        except Exception as exc:
            self._config.logf(f"{exc}")
