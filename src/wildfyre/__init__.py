"""wildfyre -- Python client for the WildFyre HTTP+JSON API.

This package builds, sends and interprets requests to the WildFyre server.
Every call goes through :class:`~wildfyre.http.Request`, which assembles the
headers and body, opens a connection, and turns the server's answer into
either a decoded JSON value or a typed failure.

Typical usage::

    from wildfyre.http import Request
    from wildfyre.models import HTTPMethod

    me = Request(HTTPMethod.GET, "/users/").add_token().get_json()

Modules:
    api: connect / disconnect facade around the token store.
    app: Typer application and ``wildfyre`` console script.
    auth: Token providers consumed by authenticated requests.
    config: Environment detection and configuration precedence.
    exceptions: Failure taxonomy with exit-code mapping.
    exit_codes: Numeric exit codes for the console script.
    http: Request builder, body framing and response decoding.
    models: Pydantic models and enums shared across the package.
    output: stdout/stderr formatting for the console script.
"""

__version__ = "0.3.0"
