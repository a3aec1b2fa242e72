"""Request body framing: plain JSON or multipart form data.

:func:`body_kind` picks the :class:`~wildfyre.models.BodyKind` from what was
attached to a request, and :func:`build_body` turns the attached values into
the bytes to send together with the matching ``Content-Type``.

A multipart body looks like this (CRLF line endings)::

    --===1700000000000000000===
    Content-Disposition: form-data; name="json"
    Content-Type: application/json; charset=UTF-8

    {"text":"hello"}
    --===1700000000000000000===
    Content-Disposition: form-data; name="file"; filename="cat.png"
    Content-Type: image/png

    <raw bytes>
    --===1700000000000000000===--

The JSON part is only present for :attr:`~wildfyre.models.BodyKind.JSON_AND_FILE`.
The server-side field names are not settled yet, so they are parameters
with :data:`MULTIPART_JSON_FIELD` and :data:`MULTIPART_FILE_FIELD` as
defaults.
"""

from __future__ import annotations

import mimetypes
import os
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Optional, Union

from wildfyre.http.encoder import CHARSET, encode_json
from wildfyre.models import BodyKind, DataType

MULTIPART_JSON_FIELD = "json"
MULTIPART_FILE_FIELD = "file"

_CRLF = b"\r\n"
_HYPHENS = b"--"


@dataclass(frozen=True)
class FileBody:
    """A file attached to a request.

    Args:
        source: Path of the file, or an open binary file object. File
            objects are read from their current position.
    """

    source: Union[str, "os.PathLike[str]", BinaryIO]

    @property
    def name(self) -> str:
        """Base name of the file, used as the multipart ``filename``."""
        if isinstance(self.source, (str, os.PathLike)):
            path = os.fspath(self.source)
        else:
            path = getattr(self.source, "name", "") or ""
        return os.path.basename(str(path)) or "file"

    @property
    def content_type(self) -> str:
        """Media type guessed from the file name."""
        guessed, _ = mimetypes.guess_type(self.name)
        return guessed or "application/octet-stream"

    def read(self) -> bytes:
        """Return the whole content of the file."""
        if isinstance(self.source, (str, os.PathLike)):
            with open(self.source, "rb") as f:
                return f.read()
        return self.source.read()


@dataclass(frozen=True)
class EncodedBody:
    """Bytes ready to be written, plus the ``Content-Type`` describing them.

    ``content_type`` is ``None`` for :attr:`~wildfyre.models.BodyKind.EMPTY`.
    """

    kind: BodyKind
    content: bytes
    content_type: Optional[str]


def body_kind(has_json: bool, has_file: bool) -> BodyKind:
    """Select the body framing from what was attached.

    A file always forces multipart framing, whether or not JSON is present.
    """
    if has_file:
        return BodyKind.JSON_AND_FILE if has_json else BodyKind.FILE
    if has_json:
        return BodyKind.JSON
    return BodyKind.EMPTY


def new_boundary() -> str:
    """Return a time-based boundary token, unique per request."""
    return f"==={time.time_ns()}==="


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', "%22").replace("\r", "%0D").replace("\n", "%0A")


def _part(headers: list[str], data: bytes) -> bytes:
    head = _CRLF.join(h.encode(CHARSET) for h in headers)
    return head + _CRLF + _CRLF + data


def build_body(
    kind: BodyKind,
    json_value: Any = None,
    file: Optional[FileBody] = None,
    *,
    boundary: Optional[str] = None,
    json_field: str = MULTIPART_JSON_FIELD,
    file_field: str = MULTIPART_FILE_FIELD,
) -> EncodedBody:
    """Frame the attached values according to *kind*.

    Args:
        kind: The framing, usually from :func:`body_kind`.
        json_value: JSON value for ``JSON`` and ``JSON_AND_FILE``.
        file: File for ``FILE`` and ``JSON_AND_FILE``.
        boundary: Multipart boundary; a fresh one from :func:`new_boundary`
            when omitted.
        json_field: Form field name of the JSON part.
        file_field: Form field name of the file part.

    Returns:
        The encoded body.

    Raises:
        ValueError: If *kind* needs a file and none was given.
    """
    if kind is BodyKind.EMPTY:
        return EncodedBody(kind, b"", None)

    if not kind.is_multipart:
        return EncodedBody(kind, encode_json(json_value), str(DataType.JSON))

    if file is None:
        raise ValueError(f"A {kind.value} body needs a file")

    boundary = boundary or new_boundary()
    delimiter = _HYPHENS + boundary.encode(CHARSET)

    parts: list[bytes] = []
    if kind is BodyKind.JSON_AND_FILE:
        parts.append(_part(
            [
                f'Content-Disposition: form-data; name="{_quote(json_field)}"',
                f"Content-Type: {DataType.JSON}; charset={CHARSET}",
            ],
            encode_json(json_value),
        ))
    parts.append(_part(
        [
            f'Content-Disposition: form-data; name="{_quote(file_field)}"; '
            f'filename="{_quote(file.name)}"',
            f"Content-Type: {file.content_type}",
        ],
        file.read(),
    ))

    content = b"".join(delimiter + _CRLF + part + _CRLF for part in parts)
    content += delimiter + _HYPHENS + _CRLF
    return EncodedBody(kind, content, f"{DataType.MULTIPART}; boundary={boundary}")
