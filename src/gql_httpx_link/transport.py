"""Execute an encoded request with httpx and classify transport failures.

Timeout configuration, pooling, TLS and redirects belong to the injected
`httpx.AsyncClient`; this module only issues the POST and maps whatever the
client reports onto the link's typed errors:

    httpx.ConnectTimeout / PoolTimeout  -> HttpLinkTimeoutError(CONNECT)
    httpx.WriteTimeout                  -> HttpLinkTimeoutError(SEND)
    httpx.ReadTimeout (and others)      -> HttpLinkTimeoutError(RECEIVE)
    asyncio.CancelledError              -> HttpLinkCanceledError
    httpx.HTTPStatusError (non-2xx)     -> HttpLinkServerError
    anything else                       -> HttpLinkUnknownError

A 2xx response whose body is not a JSON object raises HttpLinkParserError.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from .encoder import EncodedRequest
from .exceptions import (
    HttpLinkCanceledError,
    HttpLinkParserError,
    HttpLinkServerError,
    HttpLinkTimeoutError,
    HttpLinkUnknownError,
    TimeoutPhase,
)
from .models import Response
from .serialization import ResponseParser

logger = logging.getLogger(__name__)


@dataclass
class RawResponse:
    """Status, headers and decoded JSON body of a completed HTTP exchange."""

    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    http_response: Optional[httpx.Response] = field(default=None, repr=False)

    @classmethod
    def from_httpx(cls, response: httpx.Response, body: Any = None) -> "RawResponse":
        return cls(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
            http_response=response,
        )


def _timeout_phase(exc: httpx.TimeoutException) -> TimeoutPhase:
    if isinstance(exc, (httpx.ConnectTimeout, httpx.PoolTimeout)):
        return TimeoutPhase.CONNECT
    if isinstance(exc, httpx.WriteTimeout):
        return TimeoutPhase.SEND
    return TimeoutPhase.RECEIVE


def try_parse(parser: ResponseParser, body: Any) -> Optional[Response]:
    """Best-effort parse used while building server errors."""
    if not isinstance(body, dict):
        return None
    try:
        return parser.parse_response(body)
    except Exception as e:
        logger.debug("Ignoring unparseable error body: %s", e)
        return None


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


async def execute_request(
    client: httpx.AsyncClient,
    url: str,
    encoded: EncodedRequest,
    parser: ResponseParser,
) -> RawResponse:
    try:
        response = await client.post(url, **encoded.post_kwargs())
        response.raise_for_status()
    except httpx.TimeoutException as e:
        phase = _timeout_phase(e)
        logger.warning("GraphQL request to %s timed out (phase=%s)", url, phase.value)
        raise HttpLinkTimeoutError(phase=phase, cause=e) from e
    except asyncio.CancelledError as e:
        logger.debug("GraphQL request to %s cancelled", url)
        raise HttpLinkCanceledError(cause=e) from e
    except httpx.HTTPStatusError as e:
        body = _json_or_none(e.response)
        raw = RawResponse.from_httpx(e.response, body)
        logger.warning("GraphQL request to %s failed status=%s", url, raw.status_code)
        raise HttpLinkServerError(
            response=raw, parsed_response=try_parse(parser, body), cause=e
        ) from e
    except Exception as e:
        logger.warning("GraphQL request to %s failed: %s", url, e)
        raise HttpLinkUnknownError(cause=e) from e

    try:
        body = response.json()
    except ValueError as e:
        raise HttpLinkParserError(response=RawResponse.from_httpx(response), cause=e) from e
    if not isinstance(body, dict):
        raise HttpLinkParserError(
            response=RawResponse.from_httpx(response, body),
            cause=TypeError(
                f"Expected response data to be a JSON object but found {type(body).__name__}"
            ),
        )
    return RawResponse.from_httpx(response, body)


__all__ = ["RawResponse", "execute_request", "try_parse"]
