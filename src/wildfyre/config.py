"""Environment detection and configuration precedence.

The client talks either to a local testing server or to the public API.
:func:`resolve_config` decides which, and builds a fresh
:class:`~wildfyre.models.ClientConfig` that is then injected into requests.
Nothing here is cached or stored globally, so tests can exercise both
environments side by side.

Precedence (high to low):
    1. Explicit argument (the ``--testing/--production`` CLI flag)
    2. ``WILDFYRE_ENV`` environment variable
    3. Running under pytest (``PYTEST_CURRENT_TEST`` is set)
    4. Production

``WILDFYRE_API_URL``, ``WILDFYRE_TESTING_URL`` and ``WILDFYRE_TIMEOUT``
override the corresponding :class:`~wildfyre.models.ClientConfig` fields.
"""

from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import ValidationError

from wildfyre.exceptions import ConfigError
from wildfyre.models import ClientConfig, Environment

ENV_ENVIRONMENT = "WILDFYRE_ENV"
ENV_API_URL = "WILDFYRE_API_URL"
ENV_TESTING_URL = "WILDFYRE_TESTING_URL"
ENV_TIMEOUT = "WILDFYRE_TIMEOUT"


def is_running_tests() -> bool:
    """Return True when the process is executing a pytest test."""
    return "PYTEST_CURRENT_TEST" in os.environ


def _parse_environment(value: str, source: str) -> Environment:
    try:
        return Environment(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(e.value for e in Environment)
        raise ConfigError(
            f"Unknown environment '{value}' (source: {source}); expected one of: {choices}"
        ) from exc


def resolve_environment(cli_environment: Optional[str | Environment] = None) -> Environment:
    """Decide between the testing and the production server.

    Args:
        cli_environment: Explicit choice, highest precedence.

    Returns:
        The resolved :class:`~wildfyre.models.Environment`.

    Raises:
        ConfigError: If a supplied value is not a known environment.
    """
    if cli_environment is not None:
        if isinstance(cli_environment, Environment):
            return cli_environment
        return _parse_environment(cli_environment, "argument")

    env_value = os.environ.get(ENV_ENVIRONMENT)
    if env_value:
        return _parse_environment(env_value, ENV_ENVIRONMENT)

    if is_running_tests():
        return Environment.TESTING

    return Environment.PRODUCTION


def resolve_config(cli_environment: Optional[str | Environment] = None) -> ClientConfig:
    """Build the effective :class:`~wildfyre.models.ClientConfig`.

    Args:
        cli_environment: Explicit environment, overriding everything else.

    Returns:
        A new, immutable configuration.

    Raises:
        ConfigError: If an environment variable holds an invalid value.
    """
    fields: dict[str, Any] = {"environment": resolve_environment(cli_environment)}

    api_url = os.environ.get(ENV_API_URL)
    if api_url:
        fields["production_url"] = api_url.rstrip("/")
    testing_url = os.environ.get(ENV_TESTING_URL)
    if testing_url:
        fields["testing_url"] = testing_url.rstrip("/")
    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        fields["timeout"] = timeout

    try:
        return ClientConfig(**fields)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client configuration: {exc}") from exc
