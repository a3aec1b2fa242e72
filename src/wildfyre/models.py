"""Pydantic models and enums shared across wildfyre.

**Configuration model** -- :class:`ClientConfig`, produced by
:func:`~wildfyre.config.resolve_config` and injected into every
:class:`~wildfyre.http.Request`.

**Wire enums** -- :class:`HTTPMethod`, :class:`DataType` and
:class:`BodyKind`, which together describe what a request puts on the wire.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


# --- Enums ---


class Environment(str, enum.Enum):
    """Which server the client talks to."""

    TESTING = "testing"
    PRODUCTION = "production"


class HTTPMethod(str, enum.Enum):
    """HTTP methods a :class:`~wildfyre.http.Request` can be sent with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


class DataType(str, enum.Enum):
    """Media types exchanged with the server."""

    JSON = "application/json"
    MULTIPART = "multipart/form-data"

    def __str__(self) -> str:
        return self.value


class BodyKind(str, enum.Enum):
    """Which parts a request body is made of.

    Chosen once when the request is assembled, see
    :func:`~wildfyre.http.body.body_kind`. ``FILE`` and ``JSON_AND_FILE``
    are sent as multipart form data, ``JSON`` as a plain JSON document.
    """

    EMPTY = "empty"
    JSON = "json"
    FILE = "file"
    JSON_AND_FILE = "json+file"

    @property
    def is_multipart(self) -> bool:
        return self in (BodyKind.FILE, BodyKind.JSON_AND_FILE)


# --- Configuration ---


class ClientConfig(BaseModel):
    """Connection settings injected into every request.

    The environment decides which of the two base URLs is used; there is no
    way to point a single request somewhere else.

    Example::

        config = ClientConfig(environment=Environment.TESTING)
        assert config.base_url == "http://localhost:8000"
    """

    model_config = ConfigDict(frozen=True)

    environment: Environment = Field(
        default=Environment.PRODUCTION, description="testing or production"
    )
    production_url: str = Field(
        default="https://api.wildfyre.net", description="Public API base URL"
    )
    testing_url: str = Field(
        default="http://localhost:8000", description="Local API base URL used by tests"
    )
    timeout: float = Field(
        default=30, gt=0, description="Transport timeout in seconds"
    )
    client_name: str = Field(
        default="lib-python", description="Value of the From header"
    )

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def base_url(self) -> str:
        """Base URL every request address is appended to."""
        return self.testing_url if self.is_testing else self.production_url
