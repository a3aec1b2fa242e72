"""Exception hierarchy for wildfyre.

Recoverable failures inherit from :class:`WildfyreError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`wildfyre.exit_codes`.
The console script catches ``WildfyreError`` and exits with that code.

Two failure kinds come out of the request pipeline and must not be
confused:

* :class:`CantConnectError` -- no connection could be established at all.
* :class:`IssueInTransferError` -- a connection was made, but the server
  rejected the request or answered with content that is not JSON.

:class:`InternalError` is deliberately *not* a ``WildfyreError``: it is
raised only for conditions guarded by hard-coded constants (the charset),
which indicate a broken build rather than a runtime condition.

Subclass hierarchy::

    WildfyreError               (exit 1)
    +-- CantConnectError        (exit 6)
    +-- IssueInTransferError    (exit 5)
    +-- InvalidCredentialsError (exit 3)
    +-- ConfigError             (exit 1)

    InternalError (RuntimeError)
"""

from __future__ import annotations

import json
from typing import Any, Optional

from wildfyre.exit_codes import (
    EXIT_CANT_CONNECT,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_CREDENTIALS,
    EXIT_TRANSFER_ISSUE,
)


class WildfyreError(Exception):
    """Base exception for all recoverable wildfyre errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class CantConnectError(WildfyreError):
    """Raised when the request could not connect to the server.

    Covers malformed target URLs, unsupported schemes, DNS failures and
    refused connections. The low-level cause is always chained
    (``raise ... from exc``) and also kept on :attr:`cause`.
    """

    exit_code = EXIT_CANT_CONNECT

    def __init__(self, message: str, cause: BaseException):
        super().__init__(message)
        self.cause = cause


class IssueInTransferError(WildfyreError):
    """Raised when a connection was made but the exchange failed.

    Either the server refused the request (non-success status), in which
    case :attr:`error_body` holds whatever the server sent back (possibly
    empty), or the response could not be decoded as JSON, in which case the
    message contains the raw text that was received.

    Args:
        message: Human-readable description.
        error_body: Raw bytes of the server's error payload.
        status_code: HTTP status of the rejected response, when known.
    """

    exit_code = EXIT_TRANSFER_ISSUE

    def __init__(
        self,
        message: str,
        error_body: bytes = b"",
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.error_body = error_body
        self.status_code = status_code

    def json(self) -> Any:
        """Decode the server's error payload.

        Returns:
            The decoded JSON value, or ``None`` when the payload is empty
            or is not JSON.
        """
        if not self.error_body:
            return None
        try:
            return json.loads(self.error_body.decode("utf-8", errors="replace"))
        except json.JSONDecodeError:
            return None


class InvalidCredentialsError(WildfyreError):
    """Raised when the server refuses the username or the password.

    The refused :class:`IssueInTransferError` is kept on :attr:`issue` so the
    caller can inspect the server's explanation.
    """

    exit_code = EXIT_INVALID_CREDENTIALS

    def __init__(self, message: str, issue: IssueInTransferError):
        super().__init__(message)
        self.issue = issue


class ConfigError(WildfyreError):
    """Raised for invalid configuration values (unknown environment, bad timeout)."""

    exit_code = EXIT_GENERIC_FAILURE


class InternalError(RuntimeError):
    """A condition that hard-coded constants make impossible has happened.

    Please report it with the full traceback.
    """
