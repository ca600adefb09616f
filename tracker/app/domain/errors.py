"""Publish failure taxonomy.

Every failure of a single publish attempt is a PublishError carrying a
PublishErrorKind and, where one exists, the underlying cause. Callers branch on
the exception type or on `kind`; messages are for humans only.
"""
from __future__ import annotations

from enum import Enum


class PublishErrorKind(str, Enum):
    ENCODING = "encoding"
    REQUEST_CONSTRUCTION = "request_construction"
    TRANSPORT = "transport"
    UNEXPECTED_STATUS = "unexpected_status"


class PublishError(Exception):
    """Base for session publish failures."""

    kind: PublishErrorKind

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class EncodingError(PublishError):
    """Raised when the payload cannot be serialized. No request is sent."""

    kind = PublishErrorKind.ENCODING


class RequestConstructionError(PublishError):
    """Raised when the outgoing request cannot be built (e.g. malformed endpoint)."""

    kind = PublishErrorKind.REQUEST_CONSTRUCTION


class TransportError(PublishError):
    """Raised when the request could not be delivered (connection error, timeout)."""

    kind = PublishErrorKind.TRANSPORT


class UnexpectedStatusError(PublishError):
    """Raised when the collector answers with anything other than 202 Accepted."""

    kind = PublishErrorKind.UNEXPECTED_STATUS

    def __init__(self, status_code: int, status: str) -> None:
        super().__init__(f"expected 202 response status, got HTTP {status}")
        self.status_code = status_code
        self.status = status
