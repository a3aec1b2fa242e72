"""HTTP layer for wildfyre.

Builds outgoing requests, sends them through :mod:`httpx`, and decodes the
answers.

Classes and functions:
    :class:`Request` -- chainable request builder and dispatcher.
    :func:`read_json` -- decode a byte stream into a JSON value.
    :func:`build_body` -- frame JSON and file payloads.

Example::

    from wildfyre.http import Request
    from wildfyre.models import HTTPMethod

    areas = Request(HTTPMethod.GET, "/areas/").add_token().get_json()
"""

from wildfyre.http.body import EncodedBody, FileBody, body_kind, build_body
from wildfyre.http.encoder import CHARSET, encode_json, read_json
from wildfyre.http.request import Request

__all__ = [
    "CHARSET",
    "EncodedBody",
    "FileBody",
    "Request",
    "body_kind",
    "build_body",
    "encode_json",
    "read_json",
]
