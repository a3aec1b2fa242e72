"""Shared test fixtures for wildfyre.

Provides a testing configuration, an isolated token store, helpers to build
:class:`httpx.MockTransport` instances, and automatic cleanup of the global
output and logging state between tests.
"""

from __future__ import annotations

import logging
from typing import Callable

import httpx
import pytest

from wildfyre.auth import TokenStore
from wildfyre.models import ClientConfig, Environment
from wildfyre.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which become stale once CliRunner restores the real
    streams.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_wildfyre_logger() -> None:
    """Undo the handler the CLI installs so caplog keeps working."""
    yield
    logger = logging.getLogger("wildfyre")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no WILDFYRE_* variable leaks into the tests."""
    for var in [
        "WILDFYRE_ENV",
        "WILDFYRE_API_URL",
        "WILDFYRE_TESTING_URL",
        "WILDFYRE_TIMEOUT",
        "WILDFYRE_TOKEN",
    ]:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Configuration and auth
# ---------------------------------------------------------------------------


@pytest.fixture
def testing_config() -> ClientConfig:
    """Configuration pointing at the local testing server."""
    return ClientConfig(environment=Environment.TESTING)


@pytest.fixture
def token_store() -> TokenStore:
    """A fresh, empty token store."""
    return TokenStore()


# ---------------------------------------------------------------------------
# Transport helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def recording_transport() -> Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]:
    """Factory for a MockTransport that records every request it receives.

    Usage::

        transport, seen = recording_transport(json={"a": 1})
    """

    def _factory(
        status_code: int = 200, **response_kwargs
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(status_code, **response_kwargs)

        return httpx.MockTransport(handler), seen

    return _factory
