"""Encode a GraphQL `Request` into an HTTP payload.

Two modes:

* JSON: no `UploadFile` anywhere in the serialized body. The body dict is
  sent as JSON with `Content-Type: application/json`.
* Multipart (GraphQL multipart request spec): at least one file was found.
  The form carries an `operations` field (the body as JSON with every file
  replaced by null), a `map` field (`{"0": ["variables.file"], ...}`) and one
  file part per index. The `Content-Type` is left to httpx so it carries the
  multipart boundary.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .context import HttpLinkHeaders
from .exceptions import ContextReadError, RequestFormatError
from .files import UploadFile, extract_flattened_file_map
from .models import Request
from .serialization import RequestSerializer

logger = logging.getLogger(__name__)

FilePart = Tuple[str, Tuple[str, Any, str]]


@dataclass
class EncodedRequest:
    headers: Dict[str, str]
    json: Optional[Dict[str, Any]] = None
    content: Optional[str] = None
    data: Optional[Dict[str, str]] = None
    files: List[FilePart] = field(default_factory=list)

    @property
    def is_multipart(self) -> bool:
        return self.data is not None

    def post_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for `httpx.AsyncClient.post`."""
        if self.is_multipart:
            return {"headers": self.headers, "data": self.data, "files": self.files}
        return {"headers": self.headers, "content": self.content}


def prepare_request(
    request: Request,
    *,
    default_headers: Mapping[str, str],
    serializer: RequestSerializer,
) -> EncodedRequest:
    headers = {
        "Accept": "*/*",
        **default_headers,
        **_get_http_link_headers(request),
    }
    # the encoding mode decides the content type, whatever the caller passed
    for key in [k for k in headers if k.lower() == "content-type"]:
        del headers[key]

    try:
        body = serializer.serialize_request(request)
        file_map = extract_flattened_file_map(body)
    except Exception as e:
        raise RequestFormatError(cause=e, request=request) from e

    if not file_map:
        try:
            content = json.dumps(body, allow_nan=False)
        except Exception as e:
            raise RequestFormatError(cause=e, request=request) from e
        headers["Content-Type"] = "application/json"
        return EncodedRequest(headers=headers, json=body, content=content)

    try:
        operations = json.dumps(body, default=_null_files, allow_nan=False)
    except Exception as e:
        raise RequestFormatError(cause=e, request=request) from e

    file_mapping: Dict[str, List[str]] = {}
    files: List[FilePart] = []
    for i, (path, upload) in enumerate(file_map.items()):
        file_mapping[str(i)] = [path]
        files.append((str(i), upload.as_multipart()))

    logger.debug(
        "Encoding operation %s as multipart with %d file(s)",
        request.operation_name,
        len(files),
    )
    return EncodedRequest(
        headers=headers,
        data={"operations": operations, "map": json.dumps(file_mapping)},
        files=files,
    )


def _get_http_link_headers(request: Request) -> Dict[str, str]:
    try:
        link_headers = request.context.entry(HttpLinkHeaders)
        return dict(link_headers.headers) if link_headers is not None else {}
    except Exception as e:
        raise ContextReadError(cause=e) from e


def _null_files(value: Any) -> None:
    if isinstance(value, UploadFile):
        return None
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = ["EncodedRequest", "prepare_request"]
