"""Process-local holder of the current credential pair."""

import asyncio

from graphdrive.schemas.auth import CredentialPair


class TokenStore:
    """Holds the access/refresh pair of one client instance.

    The pair is swapped as a whole, never field by field. ``lock`` is held by
    the request pipeline while a refresh is in flight so concurrent expiries
    coalesce into a single refresh.
    """

    def __init__(self, credentials: CredentialPair):
        """Initialize the store.

        Args:
            credentials: Initial credential pair
        """
        self._credentials = credentials
        self._lock = asyncio.Lock()

    @property
    def lock(self) -> asyncio.Lock:
        """Lock serializing refreshes."""
        return self._lock

    def current(self) -> CredentialPair:
        """Return the current pair."""
        return self._credentials

    def replace(self, credentials: CredentialPair) -> None:
        """Replace the pair (both tokens together)."""
        if not isinstance(credentials, CredentialPair):
            raise TypeError(f"Expected CredentialPair, got {type(credentials).__name__}")
        self._credentials = credentials
