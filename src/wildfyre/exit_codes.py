"""Numeric process exit codes used by the ``wildfyre`` console script.

Each constant maps to one failure kind and is referenced by the
corresponding :class:`~wildfyre.exceptions.WildfyreError` subclass, so shell
wrappers can tell a network outage from a rejected request without parsing
stderr.

Example::

    $ wildfyre request GET /users/ --token "$WILDFYRE_TOKEN"
    $ echo $?
    6   # EXIT_CANT_CONNECT -- the server could not be reached
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_INVALID_CREDENTIALS = 3
"""The username or the password was refused by the server."""

EXIT_TRANSFER_ISSUE = 5
"""The server rejected the request or answered with something that is not JSON."""

EXIT_CANT_CONNECT = 6
"""No connection could be established (malformed URL, DNS failure, connection refused)."""
