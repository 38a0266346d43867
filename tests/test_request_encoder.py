from __future__ import annotations

import json
from typing import Any, Dict

import pytest

from gql_httpx_link.context import Context, ContextEntry, HttpLinkHeaders
from gql_httpx_link.encoder import prepare_request
from gql_httpx_link.exceptions import ContextReadError, RequestFormatError
from gql_httpx_link.files import UnsupportedValueError, UploadFile
from gql_httpx_link.models import Request
from gql_httpx_link.serialization import DefaultRequestSerializer

UPLOAD_MUTATION = "mutation($file: Upload!, $files: [Upload!]!) { upload(file: $file, files: $files) }"


def _encode(request: Request, default_headers: Dict[str, str] | None = None, serializer=None):
    return prepare_request(
        request,
        default_headers=default_headers or {},
        serializer=serializer or DefaultRequestSerializer(),
    )


def _get_path(obj: Any, path: str) -> Any:
    cursor = obj
    for seg in path.split("."):
        cursor = cursor[int(seg)] if isinstance(cursor, list) else cursor[seg]
    return cursor


def test_json_mode_without_files():
    request = Request(query="query Q { a }", variables={"id": 7}, operation_name="Q")
    encoded = _encode(request)
    assert not encoded.is_multipart
    assert encoded.headers == {"Accept": "*/*", "Content-Type": "application/json"}
    assert encoded.json == {"operationName": "Q", "variables": {"id": 7}, "query": "query Q { a }"}
    assert encoded.files == []
    assert encoded.post_kwargs() == {"headers": encoded.headers, "content": encoded.content}
    assert json.loads(encoded.content) == encoded.json


def test_extensions_are_serialized_when_present():
    request = Request(query="{ a }", extensions={"persistedQuery": {"version": 1}})
    encoded = _encode(request)
    assert encoded.json["extensions"] == {"persistedQuery": {"version": 1}}


def test_header_precedence():
    request = Request(
        query="{ a }",
        context=Context().with_entry(HttpLinkHeaders(headers={"X-A": "2", "X-B": "3"})),
    )
    encoded = prepare_request(
        request, default_headers={"X-A": "1"}, serializer=DefaultRequestSerializer()
    )
    merged = dict(encoded.headers)
    merged.pop("Content-Type")
    assert merged == {"Accept": "*/*", "X-A": "2", "X-B": "3"}


def test_context_headers_can_override_accept():
    request = Request(
        query="{ a }",
        context=Context().with_entry(HttpLinkHeaders(headers={"Accept": "application/json"})),
    )
    assert _encode(request).headers["Accept"] == "application/json"


def test_multipart_map_and_operations():
    f0 = UploadFile.from_bytes(b"zero", filename="zero.txt")
    f1 = UploadFile.from_bytes(b"one", filename="one.txt")
    request = Request(
        query=UPLOAD_MUTATION,
        variables={"file": f0, "files": ["not-a-file", f1]},
        context=Context().with_entry(HttpLinkHeaders(headers={"X-Trace": "t"})),
    )
    encoded = _encode(request)

    assert encoded.is_multipart
    assert encoded.json is None
    assert "Content-Type" not in encoded.headers
    assert encoded.headers == {"Accept": "*/*", "X-Trace": "t"}

    file_map = json.loads(encoded.data["map"])
    assert list(file_map) == ["0", "1"]
    assert file_map == {"0": ["variables.file"], "1": ["variables.files.1"]}

    operations = json.loads(encoded.data["operations"])
    assert _get_path(operations, "variables.file") is None
    assert _get_path(operations, "variables.files.1") is None
    assert _get_path(operations, "variables.files.0") == "not-a-file"
    assert operations["query"] == UPLOAD_MUTATION

    assert encoded.files == [
        ("0", ("zero.txt", b"zero", "text/plain")),
        ("1", ("one.txt", b"one", "text/plain")),
    ]
    kwargs = encoded.post_kwargs()
    assert set(kwargs) == {"headers", "data", "files"}


def test_multipart_drops_inherited_content_type():
    request = Request(query="{ a }", variables={"f": UploadFile.from_bytes(b"x")})
    encoded = _encode(request, default_headers={"content-type": "application/json"})
    assert all(k.lower() != "content-type" for k in encoded.headers)


def test_json_mode_replaces_differently_cased_content_type():
    encoded = _encode(Request(query="{ a }"), default_headers={"content-type": "text/plain"})
    content_type_keys = [k for k in encoded.headers if k.lower() == "content-type"]
    assert content_type_keys == ["Content-Type"]
    assert encoded.headers["Content-Type"] == "application/json"


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_float_in_json_mode_raises_request_format_error(value):
    request = Request(query="{ a }", variables={"x": value})
    with pytest.raises(RequestFormatError) as excinfo:
        _encode(request)
    assert isinstance(excinfo.value.cause, ValueError)
    assert excinfo.value.request is request


def test_non_finite_float_in_multipart_mode_raises_request_format_error():
    request = Request(
        query=UPLOAD_MUTATION,
        variables={"file": UploadFile.from_bytes(b"x"), "ratio": float("nan")},
    )
    with pytest.raises(RequestFormatError) as excinfo:
        _encode(request)
    assert isinstance(excinfo.value.cause, ValueError)


def test_unsupported_value_raises_request_format_error():
    request = Request(query="{ a }", variables={"when": object()})
    with pytest.raises(RequestFormatError) as excinfo:
        _encode(request)
    assert isinstance(excinfo.value.cause, UnsupportedValueError)
    assert excinfo.value.request is request


def test_serializer_failure_raises_request_format_error():
    class _Broken:
        def serialize_request(self, request: Request) -> Dict[str, Any]:
            raise RuntimeError("boom")

    request = Request(query="{ a }")
    with pytest.raises(RequestFormatError) as excinfo:
        _encode(request, serializer=_Broken())
    assert isinstance(excinfo.value.cause, RuntimeError)
    assert excinfo.value.__cause__ is excinfo.value.cause


def test_custom_serializer_shape_is_used():
    class _Flat:
        def serialize_request(self, request: Request) -> Dict[str, Any]:
            return {"q": request.query, "upload": request.variables.get("upload")}

    upload = UploadFile.from_bytes(b"x", filename="x.bin")
    encoded = _encode(Request(query="{ a }", variables={"upload": upload}), serializer=_Flat())
    assert json.loads(encoded.data["map"]) == {"0": ["upload"]}
    assert json.loads(encoded.data["operations"]) == {"q": "{ a }", "upload": None}


def test_broken_context_raises_context_read_error():
    class _BrokenContext(Context):
        def entry(self, entry_type, default=None):
            raise KeyError("corrupt")

    request = Request(query="{ a }", context=_BrokenContext())
    with pytest.raises(ContextReadError):
        _encode(request)


def test_unrelated_context_entries_are_ignored():
    class Tag(ContextEntry):
        name: str

    request = Request(query="{ a }", context=Context.from_entries(Tag(name="x")))
    assert _encode(request).headers == {"Accept": "*/*", "Content-Type": "application/json"}
