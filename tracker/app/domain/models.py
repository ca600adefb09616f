"""Domain models."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

from tracker.app.domain.errors import RequestConstructionError

_ALLOWED_SCHEMES = frozenset({"http", "https"})


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class Session:
    """One unit of monitored application activity."""

    id: str
    started_at: datetime

    @staticmethod
    def start() -> "Session":
        return Session(id=str(uuid.uuid4()), started_at=datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "startedAt": _rfc3339(self.started_at)}


def _drop_empty(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v not in (None, "")}


@dataclass(frozen=True)
class NotifierInfo:
    name: str
    version: str
    url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty({"name": self.name, "version": self.version, "url": self.url})


@dataclass(frozen=True)
class AppInfo:
    version: str = ""
    type: str = ""
    release_stage: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty(
            {"version": self.version, "type": self.type, "releaseStage": self.release_stage}
        )


@dataclass(frozen=True)
class DeviceInfo:
    hostname: str = ""
    os_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return _drop_empty({"hostname": self.hostname, "osName": self.os_name})


@dataclass(frozen=True)
class OutgoingRequest:
    """Transport-agnostic HTTP request handed to the HttpTransport port."""

    method: str
    url: str
    body: bytes
    headers: list[tuple[str, str]] = field(default_factory=list)

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))


def build_post_request(url: str, body: bytes) -> OutgoingRequest:
    """Build a POST request for `url`; raise RequestConstructionError if the URL is unusable."""
    try:
        parsed = urlparse(url)
        # Accessing .port validates the port component.
        parsed.port
    except ValueError as exc:
        raise RequestConstructionError(f"unable to create request: {exc}", cause=exc) from exc
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise RequestConstructionError(f"unable to create request: unsupported scheme in {url!r}")
    if not parsed.hostname:
        raise RequestConstructionError(f"unable to create request: missing host in {url!r}")
    return OutgoingRequest(method="POST", url=url, body=body)
