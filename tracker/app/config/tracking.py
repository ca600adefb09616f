"""Shared, mutable session tracking configuration.

One instance is created at client start-up and handed to every collaborator
that needs it. Any code reading or writing more than one field must hold
`lock` so readers never observe a half-applied reconfiguration.
"""
from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Callable

from loguru import logger

from tracker.app.config.settings import Settings, resolve_sessions_endpoint
from tracker.app.constants import (
    DEFAULT_NOTIFY_ENDPOINT,
    NOTIFIER_NAME,
    NOTIFIER_URL,
    NOTIFIER_VERSION,
)
from tracker.app.core import SERVICE_NAME
from tracker.app.domain.models import AppInfo, DeviceInfo, NotifierInfo

LogFunc = Callable[[str], None]

_APP_FIELDS = {"app_version": "version", "app_type": "type", "release_stage": "release_stage"}
_DEVICE_FIELDS = {"hostname": "hostname"}
_ENDPOINT_FIELDS = ("endpoint", "sessions_endpoint")


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _default_logf(message: str) -> None:
    logger.bind(service_name=SERVICE_NAME).warning("{}", message)


class SessionTrackingConfiguration:
    """Endpoint, credentials and identity used when publishing sessions."""

    def __init__(
        self,
        *,
        endpoint: str,
        api_key: str,
        notify_endpoint: str = DEFAULT_NOTIFY_ENDPOINT,
        notifier: NotifierInfo | None = None,
        app: AppInfo | None = None,
        device: DeviceInfo | None = None,
        logf: LogFunc | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self.endpoint = endpoint
        self.notify_endpoint = notify_endpoint
        self.api_key = api_key
        self.notifier = notifier or NotifierInfo(
            name=NOTIFIER_NAME, version=NOTIFIER_VERSION, url=NOTIFIER_URL
        )
        self.app = app or AppInfo()
        self.device = device or DeviceInfo()
        self._logf = logf or _default_logf
        self._warned_disabled = endpoint == ""
        if self._warned_disabled:
            self._warn_disabled()

    @property
    def lock(self) -> threading.Lock:
        return self._lock

    def logf(self, message: str) -> None:
        self._logf(message)

    def update(self, **changes: Any) -> None:
        """Apply a runtime reconfiguration atomically with respect to publishers.

        Accepts endpoint (or its alias sessions_endpoint), notify_endpoint,
        api_key, app_version, app_type, release_stage, hostname. Changing
        notify_endpoint without a sessions endpoint disables session tracking.
        """
        unknown = set(changes) - {*_ENDPOINT_FIELDS, "notify_endpoint", "api_key", *_APP_FIELDS, *_DEVICE_FIELDS}
        if unknown:
            raise ValueError(f"Unsupported configuration fields: {sorted(unknown)}")
        endpoint_keys = [k for k in _ENDPOINT_FIELDS if k in changes]
        if len(endpoint_keys) > 1:
            raise ValueError("Pass only one of endpoint and sessions_endpoint")
        sessions_endpoint = str(changes[endpoint_keys[0]]) if endpoint_keys else None

        with self._lock:
            if "notify_endpoint" in changes:
                self.notify_endpoint = str(changes["notify_endpoint"])
                self.endpoint = resolve_sessions_endpoint(self.notify_endpoint, sessions_endpoint)
            elif sessions_endpoint is not None:
                self.endpoint = sessions_endpoint
            if "api_key" in changes:
                self.api_key = str(changes["api_key"])
            app_changes = {_APP_FIELDS[k]: v for k, v in changes.items() if k in _APP_FIELDS}
            if app_changes:
                self.app = replace(self.app, **app_changes)
            device_changes = {_DEVICE_FIELDS[k]: v for k, v in changes.items() if k in _DEVICE_FIELDS}
            if device_changes:
                self.device = replace(self.device, **device_changes)

            # Warn once per enabled -> disabled transition.
            disabled = self.endpoint == ""
            warn = disabled and not self._warned_disabled
            self._warned_disabled = disabled

        if warn:
            self._warn_disabled()

    def _warn_disabled(self) -> None:
        _log("session_tracking_disabled")
        self.logf(
            "session tracking is disabled: the notify endpoint was changed without "
            "setting a sessions endpoint"
        )


def create_tracking_configuration(
    settings: Settings,
    *,
    logf: LogFunc | None = None,
) -> SessionTrackingConfiguration:
    return SessionTrackingConfiguration(
        endpoint=settings.resolved_sessions_endpoint,
        notify_endpoint=settings.notify_endpoint,
        api_key=settings.api_key,
        app=AppInfo(
            version=settings.app_version,
            type=settings.app_type,
            release_stage=settings.release_stage,
        ),
        device=DeviceInfo(hostname=settings.hostname),
        logf=logf,
    )
