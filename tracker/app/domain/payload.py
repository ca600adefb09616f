"""Session payload: the versioned envelope wrapping one batch of sessions."""
from __future__ import annotations

import json
from typing import Any, Protocol, Sequence

from tracker.app.constants import SESSION_PAYLOAD_VERSION
from tracker.app.domain.errors import EncodingError
from tracker.app.domain.models import AppInfo, DeviceInfo, NotifierInfo, Session


class PayloadIdentity(Protocol):
    """Identity blocks read from the tracking configuration."""

    @property
    def notifier(self) -> NotifierInfo: ...

    @property
    def app(self) -> AppInfo: ...

    @property
    def device(self) -> DeviceInfo: ...


def make_session_payload(sessions: Sequence[Session], identity: PayloadIdentity) -> dict[str, Any]:
    """Build the payload dict. Sessions are passed through in the given order."""
    return {
        "version": SESSION_PAYLOAD_VERSION,
        "notifier": identity.notifier.to_dict(),
        "app": identity.app.to_dict(),
        "device": identity.device.to_dict(),
        "sessions": [session.to_dict() for session in sessions],
    }


def encode_payload(payload: dict[str, Any]) -> bytes:
    try:
        return json.dumps(payload, separators=(",", ":"), allow_nan=False).encode()
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"unable to marshal json: {exc}", cause=exc) from exc
