"""Thread-safe in-memory token storage.

A single :class:`TokenStore` per process backs the
:mod:`wildfyre.api` facade: ``connect`` writes into it, ``disconnect``
clears it, and authenticated requests read from it. Nothing is persisted to
disk.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class TokenStore:
    """Hold the current authentication token.

    All accessors take an internal lock, so any number of threads may read
    the token while another one replaces it.

    Args:
        token: Initial token, ``None`` for a disconnected store.

    Example::

        store = TokenStore()
        store.set_token("abc")
        assert store.token() == "abc"
    """

    def __init__(self, token: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self._token = token

    def token(self) -> Optional[str]:
        """Return the current token, or ``None`` when disconnected."""
        with self._lock:
            return self._token

    def set_token(self, token: str) -> None:
        """Replace the current token.

        Raises:
            ValueError: If *token* is ``None`` or empty.
        """
        if not token:
            raise ValueError(f"Cannot store the token {token!r}")
        with self._lock:
            self._token = token
        logger.debug("Token replaced")

    def reset(self) -> None:
        """Forget the current token."""
        with self._lock:
            self._token = None
        logger.debug("Token cleared")

    def __repr__(self) -> str:
        state = "set" if self.token() is not None else "empty"
        return f"{type(self).__name__}({state})"


_default_store = TokenStore()


def default_token_store() -> TokenStore:
    """Return the process-wide :class:`TokenStore`."""
    return _default_store
