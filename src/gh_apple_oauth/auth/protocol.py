"""Protocols for the OAuth client and the CSRF-state store.

Both GhAppleOAuth and MockAppleOAuthClient implement OAuthClientProtocol,
allowing them to be used interchangeably. StateStore abstracts wherever
the caller keeps the state token between redirect and callback
(a cookie, a session, or memory in tests).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gh_apple_oauth.auth.models import AuthResult, AuthUrlResult


class OAuthClientProtocol(Protocol):
    """Protocol for Apple-via-GitHub OAuth clients."""

    def create_auth_url(self, state: str | None = None) -> AuthUrlResult:
        """Build the authorization URL and its CSRF state.

        Args:
            state: Use this state instead of generating one.

        Returns:
            AuthUrlResult with the redirect URL and the state to persist.
        """
        ...

    async def authenticate(self, code: str) -> AuthResult:
        """Exchange an authorization code and fetch the GitHub profile.

        Args:
            code: The validated code from the callback.

        Returns:
            AuthResult with the access token, user and emails.

        Raises:
            GhAppleOAuthError: If the exchange or either profile fetch fails.
        """
        ...


class StateStore(Protocol):
    """Key-value storage for CSRF state, scoped to one user-agent."""

    def set(self, key: str, value: str, max_age: int) -> None:
        """Store ``value`` under ``key`` for ``max_age`` seconds."""
        ...

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent or expired."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is a no-op."""
        ...
