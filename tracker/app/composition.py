"""Tracker composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from tracker.app.application.session_publisher import HttpSessionPublisher, SessionPublisher
from tracker.app.config.settings import Settings
from tracker.app.config.tracking import SessionTrackingConfiguration, create_tracking_configuration
from tracker.app.core import SERVICE_NAME
from tracker.app.infrastructure.http.factory import create_http_transport
from tracker.app.ports.http_transport import HttpTransport


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class TrackerDependencies:
    """Holds wired session delivery dependencies and their lifecycle."""

    def __init__(self, *, settings: Settings) -> None:
        self._settings = settings
        self._configuration: SessionTrackingConfiguration | None = None
        self._transport: HttpTransport | None = None
        self._publisher: SessionPublisher | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def configuration(self) -> SessionTrackingConfiguration:
        if self._configuration is None:
            raise RuntimeError("configuration is not initialized")
        return self._configuration

    @property
    def publisher(self) -> SessionPublisher:
        if self._publisher is None:
            raise RuntimeError("publisher is not initialized")
        return self._publisher

    def connect(self) -> None:
        self._configuration = create_tracking_configuration(self._settings)
        self._transport = create_http_transport(self._settings)
        self._publisher = HttpSessionPublisher(self._configuration, self._transport)
        _log("tracker_started", endpoint=self._configuration.endpoint)

    def close(self) -> None:
        if self._transport is not None:
            try:
                self._transport.close()
            except Exception as exc:
                logger.warning("http transport close failed: {}", exc)
            self._transport = None

        self._publisher = None
        self._configuration = None
        _log("tracker_stopped")


def create_tracker_dependencies(settings: Settings | None = None) -> TrackerDependencies:
    return TrackerDependencies(settings=settings or Settings())
