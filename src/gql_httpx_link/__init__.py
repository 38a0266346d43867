"""Terminal GraphQL link over HTTP built on httpx.

Encodes GraphQL operations as JSON, or as multipart form-data when the
variables carry `UploadFile` values, and turns HTTP responses into
`Response` results or typed `HttpLinkError`s.
"""

from .context import Context, ContextEntry, HttpLinkHeaders, HttpLinkResponseContext
from .encoder import EncodedRequest, prepare_request
from .exceptions import (
    ContextReadError,
    ContextWriteError,
    HttpLinkCanceledError,
    HttpLinkError,
    HttpLinkParserError,
    HttpLinkServerError,
    HttpLinkTimeoutError,
    HttpLinkUnknownError,
    RequestFormatError,
    TimeoutPhase,
)
from .files import UnsupportedValueError, UploadFile, extract_flattened_file_map
from .link import HttpLink
from .models import GraphQLError, Request, Response
from .serialization import (
    DefaultRequestSerializer,
    DefaultResponseParser,
    RequestSerializer,
    ResponseParser,
)
from .transport import RawResponse

__all__ = [
    "Context",
    "ContextEntry",
    "ContextReadError",
    "ContextWriteError",
    "DefaultRequestSerializer",
    "DefaultResponseParser",
    "EncodedRequest",
    "GraphQLError",
    "HttpLink",
    "HttpLinkCanceledError",
    "HttpLinkError",
    "HttpLinkHeaders",
    "HttpLinkParserError",
    "HttpLinkResponseContext",
    "HttpLinkServerError",
    "HttpLinkTimeoutError",
    "HttpLinkUnknownError",
    "RawResponse",
    "Request",
    "RequestFormatError",
    "RequestSerializer",
    "Response",
    "ResponseParser",
    "TimeoutPhase",
    "UnsupportedValueError",
    "UploadFile",
    "extract_flattened_file_map",
    "prepare_request",
]
