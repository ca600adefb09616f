"""Tracker-level constants shared across modules."""
from __future__ import annotations

# Version of the session payload format understood by the collector.
SESSION_PAYLOAD_VERSION = "1.0"

DEFAULT_NOTIFY_ENDPOINT = "https://notify.tracker.invalid"
DEFAULT_SESSIONS_ENDPOINT = "https://sessions.tracker.invalid"

NOTIFIER_NAME = "Python Session Tracker"
NOTIFIER_VERSION = "0.1.0"
NOTIFIER_URL = "https://github.com/session-tracker/session-tracker-python"

HTTP_STATUS_ACCEPTED = 202
