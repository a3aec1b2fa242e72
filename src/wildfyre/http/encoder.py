"""Conversion between JSON values and the bytes exchanged with the server.

The charset is fixed to :data:`CHARSET`. A failure to look it up can only
mean a broken interpreter, so it is reported as
:class:`~wildfyre.exceptions.InternalError` rather than as a recoverable
error.
"""

from __future__ import annotations

import codecs
import json
import logging
from typing import Any, Iterable

import httpx

from wildfyre.exceptions import InternalError, IssueInTransferError

logger = logging.getLogger(__name__)

CHARSET = "UTF-8"
"""The charset used to read and write data to the server."""


def _codec() -> codecs.CodecInfo:
    try:
        return codecs.lookup(CHARSET)
    except LookupError as exc:
        raise InternalError(
            f"There was a problem with the character encoding '{CHARSET}'. "
            "Because it is hard-written in the client, this error should never happen. "
            "Please report to the developers with the full traceback."
        ) from exc


def encode_json(value: Any) -> bytes:
    """Serialise *value* to compact JSON encoded with :data:`CHARSET`.

    Raises:
        TypeError: If *value* is not JSON-serialisable.
    """
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return _codec().encode(text)[0]


def read_json(stream: Iterable[bytes]) -> Any:
    """Read and decode the JSON document contained in *stream*.

    Args:
        stream: Byte chunks, e.g. :meth:`httpx.Response.iter_bytes` or a
            binary file object.

    Returns:
        The decoded JSON value.

    Raises:
        IssueInTransferError: If reading fails, or if the content is not
            JSON. In the latter case the message contains the received text
            and its size, which helps telling an HTML error page apart from
            a malformed document.
        InternalError: If :data:`CHARSET` is unknown.
    """
    codec = _codec()

    try:
        raw = b"".join(stream)
    except (OSError, httpx.StreamError, httpx.TransportError) as exc:
        raise IssueInTransferError(
            "There was an I/O error while reading the JSON data, or the server refused the request."
        ) from exc

    content = codec.decode(raw, "replace")[0]
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        logger.warning("Response is not JSON (%d characters)", len(content))
        raise IssueInTransferError(
            f"The content of the response was not JSON:\n{content}\nSize: {len(content)}",
            error_body=raw,
        ) from exc
