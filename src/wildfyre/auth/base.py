"""The token provider protocol.

See Also:
    :mod:`wildfyre.auth.store` for the in-memory implementation.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class TokenProvider(Protocol):
    """Anything that can hand out the current authentication token.

    Implementations must tolerate concurrent calls from several threads.
    Requests only ever read from a provider, never write to it.
    """

    def token(self) -> Optional[str]:
        """Return the current token, or ``None`` if there is none."""
        ...
