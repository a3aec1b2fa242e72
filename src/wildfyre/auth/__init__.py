"""Token providers for authenticated requests.

The request pipeline never acquires or stores tokens itself. When a request
is authenticated without an explicit token, it asks a
:class:`TokenProvider` for the current one.

- :class:`TokenProvider` -- the single-accessor protocol consumed by
  :meth:`~wildfyre.http.Request.add_token`.
- :class:`TokenStore` -- thread-safe in-memory provider.
- :func:`default_token_store` -- the process-wide store used when no
  provider is injected.

Typical usage::

    from wildfyre.auth import default_token_store

    default_token_store().set_token("5b2e...")
"""

from wildfyre.auth.base import TokenProvider
from wildfyre.auth.store import TokenStore, default_token_store

__all__ = [
    "TokenProvider",
    "TokenStore",
    "default_token_store",
]
