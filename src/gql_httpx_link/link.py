"""Terminal GraphQL link executing operations over HTTP with httpx.

`HttpLink.request()` is an async generator yielding exactly one `Response`
per call, or raising one of the errors from `gql_httpx_link.exceptions`:

    encode (JSON or multipart) -> POST via httpx -> classify & parse -> yield

Each call builds its own headers, file map and payload, so one link instance
can serve concurrent requests as long as the underlying `httpx.AsyncClient`
is shared safely (which httpx guarantees). Serialization of requests and
parsing of responses are pluggable via `serializer` / `parser`.
"""
from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Mapping, Optional, Set

import httpx

from .config import Settings, get_settings
from .decoder import classify_and_parse
from .encoder import prepare_request
from .models import Request, Response
from .serialization import (
    DefaultRequestSerializer,
    DefaultResponseParser,
    RequestSerializer,
    ResponseParser,
)
from .transport import execute_request

logger = logging.getLogger(__name__)


class HttpLink:
    def __init__(
        self,
        endpoint: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        default_headers: Optional[Mapping[str, str]] = None,
        serializer: Optional[RequestSerializer] = None,
        parser: Optional[ResponseParser] = None,
    ):
        if not endpoint:
            raise ValueError("endpoint must be a non-empty URL")
        self.endpoint = endpoint
        self.client = client if client is not None else httpx.AsyncClient()
        self.default_headers = dict(default_headers or {})
        self.serializer: RequestSerializer = serializer or DefaultRequestSerializer()
        self.parser: ResponseParser = parser or DefaultResponseParser()
        self._inflight: Set[asyncio.Task] = set()
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "HttpLink":
        """Build a link (and its httpx client) from environment settings."""
        settings = settings or get_settings()
        client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                settings.GRAPHQL_TIMEOUT, connect=settings.GRAPHQL_CONNECT_TIMEOUT
            )
        )
        kwargs.setdefault("default_headers", settings.GRAPHQL_DEFAULT_HEADERS)
        return cls(settings.GRAPHQL_ENDPOINT, client=client, **kwargs)

    @property
    def closed(self) -> bool:
        return self._closed

    async def request(self, request: Request) -> AsyncIterator[Response]:
        encoded = prepare_request(
            request,
            default_headers=self.default_headers,
            serializer=self.serializer,
        )
        logger.debug(
            "POST %s operation=%s multipart=%s",
            self.endpoint,
            request.operation_name,
            encoded.is_multipart,
        )
        task = asyncio.current_task()
        if task is not None:
            self._inflight.add(task)
        try:
            raw = await execute_request(self.client, self.endpoint, encoded, self.parser)
        finally:
            if task is not None:
                self._inflight.discard(task)
        yield classify_and_parse(raw, self.parser, request.context)

    async def execute(self, request: Request) -> Response:
        """Run `request` and return its single result."""
        results = [r async for r in self.request(request)]
        return results[0]

    async def close(self, *, force: bool = False) -> None:
        """Release the httpx client. Safe to call more than once.

        With `force=True` in-flight requests are cancelled first and fail
        with `HttpLinkCanceledError`.
        """
        if self._closed:
            return
        self._closed = True
        if force:
            current = asyncio.current_task()
            for task in list(self._inflight):
                if task is not current:
                    task.cancel()
        await self.client.aclose()
        logger.debug("Closed HTTP link for %s (force=%s)", self.endpoint, force)

    async def __aenter__(self) -> "HttpLink":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


__all__ = ["HttpLink"]
