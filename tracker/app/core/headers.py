"""Request headers shared by every delivery path (events and sessions).

The collector identifies the project and the payload format from these
headers, so the names must stay in sync with the event reporting path.
"""
from __future__ import annotations

HEADER_PREFIX = "Tracker"

API_KEY_HEADER = f"{HEADER_PREFIX}-Api-Key"
PAYLOAD_VERSION_HEADER = f"{HEADER_PREFIX}-Payload-Version"
CONTENT_TYPE_HEADER = "Content-Type"
JSON_CONTENT_TYPE = "application/json"


def prefixed_headers(api_key: str, payload_version: str) -> dict[str, str]:
    """Headers derived from the API key and payload version. Pure; same input, same output."""
    return {
        API_KEY_HEADER: api_key,
        PAYLOAD_VERSION_HEADER: payload_version,
        CONTENT_TYPE_HEADER: JSON_CONTENT_TYPE,
    }
