"""Settings for the session tracker."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tracker.app.constants import DEFAULT_NOTIFY_ENDPOINT, DEFAULT_SESSIONS_ENDPOINT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    api_key: str = Field("", validation_alias="TRACKER_API_KEY")

    notify_endpoint: str = Field(DEFAULT_NOTIFY_ENDPOINT, validation_alias="TRACKER_NOTIFY_ENDPOINT")
    # Left unset, the default collector is used unless notify_endpoint was overridden.
    sessions_endpoint: str | None = Field(None, validation_alias="TRACKER_SESSIONS_ENDPOINT")

    app_version: str = Field("", validation_alias="TRACKER_APP_VERSION")
    app_type: str = Field("", validation_alias="TRACKER_APP_TYPE")
    release_stage: str = Field("production", validation_alias="TRACKER_RELEASE_STAGE")
    hostname: str = Field("", validation_alias="TRACKER_HOSTNAME")

    http_connect_timeout_seconds: float = Field(5.0, validation_alias="TRACKER_HTTP_CONNECT_TIMEOUT_SECONDS")
    http_read_timeout_seconds: float = Field(15.0, validation_alias="TRACKER_HTTP_READ_TIMEOUT_SECONDS")

    @property
    def resolved_sessions_endpoint(self) -> str:
        return resolve_sessions_endpoint(self.notify_endpoint, self.sessions_endpoint)


def resolve_sessions_endpoint(notify_endpoint: str, sessions_endpoint: str | None) -> str:
    """Sessions endpoint to use; "" (tracking disabled) when only the notify endpoint was customised."""
    if sessions_endpoint is not None:
        return sessions_endpoint
    if notify_endpoint != DEFAULT_NOTIFY_ENDPOINT:
        return ""
    return DEFAULT_SESSIONS_ENDPOINT
