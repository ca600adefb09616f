"""Concrete HTTP transport implementation using httpx (injected where HttpTransport is needed)."""
from __future__ import annotations

import httpx

from tracker.app.domain.models import OutgoingRequest
from tracker.app.ports.http_transport import (
    HttpTransport,
    HttpTransportError,
    HttpTransportTimeoutError,
    RequestTimeout,
    TransportResponse,
)


class _HttpxResponseAdapter:
    """Adapts httpx.Response to the TransportResponse protocol."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def status(self) -> str:
        reason = self._response.reason_phrase
        return f"{self._response.status_code} {reason}".strip()

    def close(self) -> None:
        self._response.close()


class HttpxTransport(HttpTransport):
    """HttpTransport implementation using httpx.Client."""

    def __init__(self, client: httpx.Client, timeout: RequestTimeout) -> None:
        self._client = client
        self._timeout = httpx.Timeout(
            connect=timeout.connect_seconds,
            read=timeout.read_seconds,
            write=timeout.read_seconds,
            pool=timeout.connect_seconds,
        )

    def send(self, request: OutgoingRequest) -> TransportResponse:
        try:
            httpx_request = self._client.build_request(
                request.method,
                request.url,
                content=request.body,
                headers=list(request.headers),
                timeout=self._timeout,
            )
            response = self._client.send(httpx_request, stream=True)
            return _HttpxResponseAdapter(response)
        except httpx.TimeoutException as exc:
            raise HttpTransportTimeoutError(f"timeout while sending to {request.url}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise HttpTransportError(f"http send failed for {request.url}: {exc}") from exc
        except ValueError as exc:
            # Header values httpx cannot encode (e.g. non-ASCII api key).
            raise HttpTransportError(f"unable to build request for {request.url}: {exc}") from exc

    def close(self) -> None:
        self._client.close()
