"""Credential exchange and token revocation descriptors."""

from __future__ import annotations

from robinhood_client.endpoints.types import Token
from robinhood_client.net.method import ApiMethod


def authorize(username: str, password: str) -> ApiMethod:
    """Exchange username/password for a token (no multifactor)."""
    return ApiMethod.post(
        "api-token-auth/",
        params={"username": username, "password": password},
        result_shape=Token,
    )


def logout() -> ApiMethod:
    """Revoke the current token. The response body is ignored."""
    return ApiMethod.post("api-token-logout/", requires_auth=True)
