"""Typed error taxonomy raised by the HTTP link.

Every failure the link can produce is mapped onto one of the classes below at
the point where it happens and raised immediately; the link never retries.
All errors carry the originating exception in `cause` (also chained through
`__cause__`) so callers and retry policies further up the chain can inspect
what actually went wrong.

Categories:
    RequestFormatError     serialization or file extraction failed before
                           any network call was made.
    HttpLinkTimeoutError   connect / send / receive timeout reported by httpx.
    HttpLinkCanceledError  the in-flight call was cancelled.
    HttpLinkServerError    non-2xx status, or a body without `data`/`errors`.
    HttpLinkParserError    the body could not be parsed into a result.
    ContextReadError /
    ContextWriteError      typed context entry access failed.
    HttpLinkUnknownError   any transport failure not classified above.
"""
from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .models import Request, Response
    from .transport import RawResponse


class HttpLinkError(Exception):
    """Base class for all errors raised by the link."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class RequestFormatError(HttpLinkError):
    """The request could not be encoded into an HTTP payload."""

    def __init__(self, *, cause: BaseException, request: "Request"):
        self.request = request
        super().__init__(f"Failed to format request: {cause}", cause=cause)


class TimeoutPhase(str, Enum):
    CONNECT = "connect"
    SEND = "send"
    RECEIVE = "receive"


class HttpLinkTimeoutError(HttpLinkError, TimeoutError):
    """The HTTP client gave up waiting during one of the request phases.

    Also a builtin `TimeoutError` for callers that only handle that.
    """

    def __init__(self, *, phase: TimeoutPhase, cause: BaseException):
        self.phase = phase
        super().__init__(f"Request timed out during {phase.value} phase: {cause}", cause=cause)


class HttpLinkCanceledError(HttpLinkError, asyncio.CancelledError):
    """The in-flight request was cancelled.

    Also an `asyncio.CancelledError` so task cancellation keeps propagating
    through code that only knows about asyncio.
    """

    def __init__(self, *, cause: Optional[BaseException] = None):
        super().__init__("Request was cancelled", cause=cause)


class HttpLinkServerError(HttpLinkError):
    """The server answered, but not with a usable GraphQL result.

    `parsed_response` holds the best-effort parse of the body when one was
    possible (e.g. a 400 carrying GraphQL `errors`), otherwise None.
    """

    def __init__(
        self,
        *,
        response: "RawResponse",
        parsed_response: Optional["Response"] = None,
        cause: Optional[BaseException] = None,
    ):
        self.response = response
        self.parsed_response = parsed_response
        super().__init__(f"Server error (status={response.status_code})", cause=cause)

    @property
    def status_code(self) -> int:
        return self.response.status_code


class HttpLinkParserError(HttpLinkError):
    """The response body could not be parsed into a GraphQL result."""

    def __init__(self, *, response: Any, cause: BaseException):
        self.response = response
        super().__init__(f"Failed to parse response: {cause}", cause=cause)


class ContextReadError(HttpLinkError):
    def __init__(self, *, cause: BaseException):
        super().__init__(f"Failed to read context entry: {cause}", cause=cause)


class ContextWriteError(HttpLinkError):
    def __init__(self, *, cause: BaseException):
        super().__init__(f"Failed to write context entry: {cause}", cause=cause)


class HttpLinkUnknownError(HttpLinkError):
    """Transport failure that does not fit any other category."""

    def __init__(self, *, cause: BaseException):
        super().__init__(f"Unexpected transport failure: {cause}", cause=cause)


__all__ = [
    "ContextReadError",
    "ContextWriteError",
    "HttpLinkCanceledError",
    "HttpLinkError",
    "HttpLinkParserError",
    "HttpLinkServerError",
    "HttpLinkTimeoutError",
    "HttpLinkUnknownError",
    "RequestFormatError",
    "TimeoutPhase",
]
