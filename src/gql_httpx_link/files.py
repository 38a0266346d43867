"""Upload file leaves and discovery of files inside serialized requests.

Implements the discovery half of the GraphQL multipart request spec: the
serialized request body is walked depth-first and every `UploadFile` found is
recorded under the dotted path at which it occurs, e.g.::

    {"variables": {"file": f1, "files": [None, f2]}}
    -> {"variables.file": f1, "variables.files.1": f2}

Only the value shapes JSON can carry are allowed in a body (dict, list/tuple,
str, int, float, bool, None) plus `UploadFile`. Anything else raises
`UnsupportedValueError` naming the offending path and type instead of being
coerced.

Traversal order is dict insertion order and list index order, the same order
`json.dumps` walks the body, so file indices assigned from the returned
mapping line up with the encoded `operations` text.
"""
from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass
from typing import IO, Any, Dict, Optional, Sequence, Tuple, Union

__all__ = [
    "UnsupportedValueError",
    "UploadFile",
    "extract_flattened_file_map",
]

FileContent = Union[bytes, IO[bytes]]

_SCALARS = (str, int, float, bool)


@dataclass(frozen=True)
class UploadFile:
    """A binary payload to be sent as a multipart file part."""

    content: FileContent
    filename: Optional[str] = None
    content_type: str = "application/octet-stream"

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> "UploadFile":
        return cls(
            content=data,
            filename=filename,
            content_type=content_type or _guess_type(filename),
        )

    @classmethod
    def from_path(cls, path: str, *, content_type: Optional[str] = None) -> "UploadFile":
        """Read a local file into memory as an upload."""
        with open(path, "rb") as f:
            data = f.read()
        name = os.path.basename(path)
        return cls(content=data, filename=name, content_type=content_type or _guess_type(name))

    def as_multipart(self) -> Tuple[str, FileContent, str]:
        """Return the `(filename, content, content_type)` tuple httpx expects."""
        return (self.filename or "upload", self.content, self.content_type)


class UnsupportedValueError(TypeError):
    """A request body contained a value that is neither JSON nor a file."""

    def __init__(self, value: Any, path: Sequence[str]):
        self.value = value
        self.path = ".".join(path)
        self.type_name = type(value).__name__
        super().__init__(
            f"{value!r} of type {self.type_name} was found in the request at path "
            f"'{self.path}', but only dict, list, UploadFile, str, int, float, bool "
            "and None are allowed"
        )


def extract_flattened_file_map(
    body: Any, path: Sequence[str] = ()
) -> Dict[str, UploadFile]:
    files: Dict[str, UploadFile] = {}
    _walk(body, list(path), files)
    return files


def _walk(value: Any, path: list[str], out: Dict[str, UploadFile]) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _walk(item, path + [str(key)], out)
    elif isinstance(value, (list, tuple)):
        for idx, item in enumerate(value):
            _walk(item, path + [str(idx)], out)
    elif isinstance(value, UploadFile):
        out[".".join(path)] = value
    elif value is None or isinstance(value, _SCALARS):
        return
    else:
        raise UnsupportedValueError(value, path)


def _guess_type(filename: Optional[str]) -> str:
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return "application/octet-stream"
