"""Session — in-memory holder of the auth token and account number."""

from __future__ import annotations

from robinhood_client.net.errors import NotLoggedInError


class Session:
    """Credential state for one client instance.

    Not safe for concurrent mutation; the owning client is the only writer.
    """

    def __init__(self) -> None:
        self._token: str | None = None
        self._account_id: str | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def account_id(self) -> str | None:
        return self._account_id

    def has_token(self) -> bool:
        return self._token is not None

    def set_token(self, token: str) -> None:
        """Store a token. A different token unbinds the current account."""
        if token != self._token:
            self._account_id = None
        self._token = token

    def set_account_id(self, account_id: str) -> None:
        """Bind the account number. Requires a token to be set first."""
        if self._token is None:
            raise NotLoggedInError("Cannot set an account number before a token")
        self._account_id = account_id

    def clear(self) -> None:
        self._token = None
        self._account_id = None

    def __repr__(self) -> str:
        # never echo the token itself
        return f"Session(has_token={self.has_token()}, account_id={self._account_id!r})"
