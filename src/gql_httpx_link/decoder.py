"""Classify a raw HTTP response and parse it into a GraphQL `Response`."""
from __future__ import annotations

import logging

from .context import Context, HttpLinkResponseContext
from .exceptions import ContextWriteError, HttpLinkParserError, HttpLinkServerError
from .models import Response
from .serialization import ResponseParser
from .transport import RawResponse, try_parse

logger = logging.getLogger(__name__)


def is_server_error(raw: RawResponse) -> bool:
    """Return True when the response is not an acceptable GraphQL result.

    Key presence only: `{"data": null, "errors": [...]}` is a result, `{}` is
    not.
    """
    body = raw.body if isinstance(raw.body, dict) else {}
    return raw.status_code >= 300 or ("data" not in body and "errors" not in body)


def classify_and_parse(
    raw: RawResponse,
    parser: ResponseParser,
    context: Context | None = None,
) -> Response:
    if is_server_error(raw):
        logger.warning(
            "GraphQL response rejected status=%s keys=%s",
            raw.status_code,
            sorted(raw.body) if isinstance(raw.body, dict) else None,
        )
        raise HttpLinkServerError(response=raw, parsed_response=try_parse(parser, raw.body))

    try:
        parsed = parser.parse_response(raw.body)
    except Exception as e:
        raise HttpLinkParserError(response=raw, cause=e) from e

    try:
        base = context if context is not None else parsed.context
        for entry in parsed.context:
            base = base.with_entry(entry)
        new_context = base.with_entry(
            HttpLinkResponseContext(status_code=raw.status_code, headers=raw.headers)
        )
    except Exception as e:
        raise ContextWriteError(cause=e) from e
    return parsed.with_context(new_context)


__all__ = ["classify_and_parse", "is_server_error"]
