"""Request builder and transport for the WildFyre API.

This module provides :class:`Request`, through which every call to the
server goes. A request is created for one call site, configured with
chainable methods, then dispatched once::

    post = (
        Request(HTTPMethod.POST, "/areas/fun/")
        .add_token()
        .add_json({"text": "Hello"})
        .add_file("cat.png")
        .get_json()
    )

Dispatch is synchronous and runs on the calling thread. Each request owns
its own :class:`httpx.Client`, headers and bodies; the only shared state is
the token provider, which is only read.

Failures are split in two kinds:

- :class:`~wildfyre.exceptions.CantConnectError` -- no connection could be
  established (malformed URL, DNS failure, connection refused).
- :class:`~wildfyre.exceptions.IssueInTransferError` -- the connection
  worked, but the server refused the request or did not answer with JSON.
"""

from __future__ import annotations

import logging
import os
import warnings
from contextlib import contextmanager
from typing import Any, BinaryIO, Iterator, Optional, Union

import httpx

from wildfyre.auth import TokenProvider, default_token_store
from wildfyre.config import resolve_config
from wildfyre.exceptions import CantConnectError, IssueInTransferError
from wildfyre.http.body import FileBody, body_kind, build_body
from wildfyre.http.encoder import read_json
from wildfyre.models import ClientConfig, DataType, HTTPMethod

logger = logging.getLogger(__name__)

_CONNECT_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.UnsupportedProtocol)


class Request:
    """A single request to the server, executed by :meth:`get_json`.

    The target URL is resolved once, here, from the configured base URL and
    *address*. Two headers are set right away: ``From`` (the client name)
    and ``Host``.

    Args:
        method: HTTP method required by the API.
        address: Address to access, relative to the base URL
            (e.g. ``"/users/"``).
        config: Connection settings; resolved from the environment with
            :func:`~wildfyre.config.resolve_config` when omitted.
        token_provider: Source of the token for :meth:`add_token`; the
            process-wide :func:`~wildfyre.auth.default_token_store` when
            omitted.
        transport: Optional :class:`httpx.BaseTransport` used instead of
            the network.

    Raises:
        CantConnectError: If the target URL is malformed.
    """

    def __init__(
        self,
        method: Union[HTTPMethod, str],
        address: str,
        *,
        config: Optional[ClientConfig] = None,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config if config is not None else resolve_config()
        self._method = method
        self._address = address
        self._token_provider = (
            token_provider if token_provider is not None else default_token_store()
        )
        self._transport = transport

        self._url = resolve_url(self._config.base_url, address)
        self._headers: dict[str, str] = {
            "From": self._config.client_name,
            "Host": self._url.netloc.decode("ascii"),
        }

        self._json: Any = None
        self._has_json = False
        self._file: Optional[FileBody] = None

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    @property
    def url(self) -> httpx.URL:
        """The resolved target URL."""
        return self._url

    @property
    def method(self) -> Union[HTTPMethod, str]:
        return self._method

    @property
    def headers(self) -> dict[str, str]:
        """A copy of the headers configured so far."""
        return dict(self._headers)

    def add_header(self, name: str, value: str) -> Request:
        """Set a header, replacing any previous value.

        Returns:
            This request itself, to allow method chaining.
        """
        self._headers[name] = value
        return self

    def add_token(self, token: Optional[str] = None) -> Request:
        """Make the request authenticated.

        Args:
            token: The token. When omitted, the token provider is asked for
                the current one right now, not at dispatch time.

        Returns:
            This request itself, to allow method chaining.
        """
        if token is None:
            token = self._token_provider.token()
            if token is None:
                logger.warning("No token available, %s will likely be refused", self._address)

        self._headers["Authorization"] = "token" if token is None else f"token {token}"
        return self

    def add_json(self, value: Any) -> Request:
        """Attach a JSON value as the body of this request.

        Whether it is sent alone or as one part of a multipart body is
        decided at dispatch time, depending on whether a file is attached.

        Returns:
            This request itself, to allow method chaining.
        """
        self._json = value
        self._has_json = True
        return self

    def add_file(self, file: Union[str, os.PathLike[str], BinaryIO]) -> Request:
        """Attach a file; the request will be sent as multipart form data.

        Args:
            file: Path of the file, or an open binary file object.

        Returns:
            This request itself, to allow method chaining.
        """
        self._file = FileBody(file)
        return self

    # ------------------------------------------------------------------ #
    # Dispatch
    # ------------------------------------------------------------------ #

    @contextmanager
    def send(self) -> Iterator[httpx.Response]:
        """Send the request and yield the live, still unread, response.

        The response and its connection are closed when the block exits,
        whichever way it exits.

        Raises:
            CantConnectError: If no connection could be established.
            IssueInTransferError: If the exchange broke down midway.
            ValueError: If the method is not a supported HTTP method.
        """
        with open_client(self._config, self._transport) as client:
            request = self._build(client)
            logger.debug("%s %s", request.method, request.url)
            try:
                response = client.send(request, stream=True)
            except _CONNECT_ERRORS as exc:
                raise CantConnectError("Cannot connect to the server.", exc) from exc
            except httpx.TransportError as exc:
                raise IssueInTransferError(
                    f"There was an I/O error while talking to the server: {exc}"
                ) from exc

            try:
                yield response
            finally:
                response.close()

    def get_json(self) -> Any:
        """Request a JSON response from the server, and return it.

        Returns:
            The decoded JSON response.

        Raises:
            CantConnectError: If no connection could be established.
            IssueInTransferError: If the server refused the request (see
                :meth:`~wildfyre.exceptions.IssueInTransferError.json` for its
                explanation) or did not answer with JSON.
        """
        self._headers["Accept"] = str(DataType.JSON)
        with self.send() as response:
            return read_json(get_input_stream(response))

    def get(self) -> Any:
        """Deprecated alias of :meth:`get_json`."""
        warnings.warn(
            "Request.get() implicitly requests JSON, use Request.get_json() instead.",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.get_json()

    def _build(self, client: httpx.Client) -> httpx.Request:
        method = set_requested_method(self._method)
        headers = dict(self._headers)

        kind = body_kind(self._has_json, self._file is not None)
        body = build_body(kind, self._json, self._file)
        if body.content_type is not None:
            headers["Content-Type"] = body.content_type
        logger.debug(
            "Body of %s %s: %s, %d bytes", method.value, self._address, kind.value, len(body.content)
        )

        return client.build_request(
            method.value,
            self._url,
            headers=headers,
            content=body.content if body.content_type is not None else None,
        )

    def __repr__(self) -> str:
        return f"<Request {self._method} {self._url}>"


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def resolve_url(base_url: str, address: str) -> httpx.URL:
    """Concatenate *base_url* and *address* into an absolute HTTP(S) URL.

    Raises:
        CantConnectError: If the result is not a valid HTTP(S) URL.
    """
    target = base_url + address
    try:
        url = httpx.URL(target)
    except httpx.InvalidURL as exc:
        raise CantConnectError(f"Cannot connect to the server: invalid URL '{target}'.", exc) from exc

    if url.scheme not in ("http", "https") or not url.host:
        cause = httpx.InvalidURL(f"Expected an absolute http(s) URL, got '{target}'")
        raise CantConnectError(f"Cannot connect to the server: invalid URL '{target}'.", cause) from cause
    return url


def open_client(config: ClientConfig, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """Create the client a single request is sent through.

    Raises:
        CantConnectError: If the client cannot be created (e.g. the TLS
            context cannot be loaded).
    """
    try:
        return httpx.Client(transport=transport, timeout=config.timeout)
    except OSError as exc:
        raise CantConnectError("Cannot connect to the server.", exc) from exc


def set_requested_method(method: Union[HTTPMethod, str]) -> HTTPMethod:
    """Validate *method* against the supported HTTP methods.

    Raises:
        ValueError: If *method* is not one of :class:`~wildfyre.models.HTTPMethod`.
    """
    if isinstance(method, HTTPMethod):
        return method
    try:
        return HTTPMethod(method.upper())
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Cannot set the method to {method}") from exc


def get_input_stream(response: httpx.Response) -> Iterator[bytes]:
    """Return the body of a successful *response* as a stream of chunks.

    Raises:
        IssueInTransferError: If the server refused the request. The error
            carries the server's error payload, which may be empty.
    """
    if response.status_code < 400:
        return response.iter_bytes()

    error_body = _read_error_stream(response)
    logger.warning(
        "%s %s refused with HTTP %d", response.request.method, response.request.url, response.status_code
    )
    raise IssueInTransferError(
        f"The server refused the request (HTTP {response.status_code}).",
        error_body=error_body,
        status_code=response.status_code,
    )


def _read_error_stream(response: httpx.Response) -> bytes:
    try:
        return response.read()
    except httpx.HTTPError as exc:
        logger.debug("Could not read the error payload: %s", exc)
        return b""
