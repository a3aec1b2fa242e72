"""Connect to and disconnect from the WildFyre server.

These helpers only manage the token held by a
:class:`~wildfyre.auth.TokenStore`; authenticated requests then pick it up
through :meth:`~wildfyre.http.Request.add_token`.

Example::

    from wildfyre import api

    api.connect("alice", "secret")
    assert api.is_connected()
    api.disconnect()
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from wildfyre.auth import TokenStore, default_token_store
from wildfyre.exceptions import InvalidCredentialsError, IssueInTransferError
from wildfyre.http import Request
from wildfyre.models import ClientConfig, HTTPMethod

logger = logging.getLogger(__name__)

AUTH_ADDRESS = "/account/auth/"

# Statuses meaning the credentials themselves were refused.
CREDENTIALS_REFUSED = frozenset({400, 401, 403})


def request_token(
    username: str,
    password: str,
    *,
    config: Optional[ClientConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> str:
    """Exchange a username and a password for a token.

    Raises:
        CantConnectError: If the server cannot be reached.
        InvalidCredentialsError: If the server refuses the credentials
            (HTTP 400, 401 or 403).
        IssueInTransferError: If the server rejects the request for another
            reason, or the answer does not contain a token.
    """
    request = Request(HTTPMethod.POST, AUTH_ADDRESS, config=config, transport=transport)
    request.add_json({"username": username, "password": password})

    try:
        answer = request.get_json()
    except IssueInTransferError as exc:
        if exc.status_code not in CREDENTIALS_REFUSED:
            raise
        raise InvalidCredentialsError("Incorrect username or password", exc) from exc

    token = answer.get("token") if isinstance(answer, dict) else None
    if not isinstance(token, str) or not token:
        raise IssueInTransferError(f"The server did not answer with a token: {answer!r}")
    return token


def connect(
    username: str,
    password: str,
    *,
    config: Optional[ClientConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
    store: Optional[TokenStore] = None,
) -> str:
    """Log in with a username and a password.

    The acquired token is stored in *store* (the process-wide store by
    default) and returned.
    """
    token = request_token(username, password, config=config, transport=transport)
    (store or default_token_store()).set_token(token)
    logger.info("Connected as %s", username)
    return token


def connect_with_token(token: Optional[str], *, store: Optional[TokenStore] = None) -> None:
    """Use an already known token.

    Raises:
        ValueError: If *token* is ``None`` or empty.
    """
    if not token:
        raise ValueError(f"Cannot connect with the token {token!r}")
    (store or default_token_store()).set_token(token)


def disconnect(*, store: Optional[TokenStore] = None) -> None:
    """Forget the current token."""
    (store or default_token_store()).reset()


def is_connected(*, store: Optional[TokenStore] = None) -> bool:
    """Whether a token is stored.

    This does not tell whether the server still accepts it, only that one of
    the connect functions succeeded and :func:`disconnect` was not called
    since.
    """
    return (store or default_token_store()).token() is not None
