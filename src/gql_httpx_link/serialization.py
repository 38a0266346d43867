"""Pluggable request serializer and response parser strategies.

The link only depends on the two one-method protocols below. The defaults
produce and consume the standard GraphQL-over-HTTP JSON shapes; pass your own
implementations to `HttpLink` for servers with non-standard envelopes.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Protocol

from .models import GraphQLError, Request, Response


class RequestSerializer(Protocol):
    def serialize_request(self, request: Request) -> Dict[str, Any]: ...


class ResponseParser(Protocol):
    def parse_response(self, body: Mapping[str, Any]) -> Response: ...


class DefaultRequestSerializer:
    """Emit `{"operationName", "variables", "query"}` (+ `extensions`).

    Variable values are passed through as-is so `UploadFile` leaves remain in
    place for the multipart encoder to find.
    """

    def serialize_request(self, request: Request) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "operationName": request.operation_name,
            "variables": request.variables,
            "query": request.query,
        }
        if request.extensions:
            body["extensions"] = request.extensions
        return body


class DefaultResponseParser:
    """Parse a standard `{"data": ..., "errors": [...]}` body.

    Raises `ValueError` (or `pydantic.ValidationError`) for bodies whose
    `data` is not an object or whose `errors` is not a list of error objects.
    """

    def parse_response(self, body: Mapping[str, Any]) -> Response:
        data = body.get("data")
        if data is not None and not isinstance(data, dict):
            raise ValueError(f"'data' must be an object or null, got {type(data).__name__}")
        raw_errors = body.get("errors")
        errors = None
        if raw_errors is not None:
            if not isinstance(raw_errors, list):
                raise ValueError(
                    f"'errors' must be a list or null, got {type(raw_errors).__name__}"
                )
            errors = [GraphQLError.model_validate(e) for e in raw_errors]
        return Response(data=data, errors=errors)


__all__ = [
    "DefaultRequestSerializer",
    "DefaultResponseParser",
    "RequestSerializer",
    "ResponseParser",
]
