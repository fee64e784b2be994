"""Mock OAuth client for development and testing.

This module provides a mock implementation of OAuthClientProtocol that
never contacts GitHub or Apple. Its authorization URL points straight back
at the callback with a known code, so the whole redirect round trip can be
exercised locally with DEV__AUTH_MOCK=true.
"""

from __future__ import annotations

from urllib.parse import urlencode

from gh_apple_oauth.auth.errors import ErrorCode, GhAppleOAuthError
from gh_apple_oauth.auth.models import (
    AuthResult,
    AuthUrlResult,
    GithubEmail,
    GithubUser,
)
from gh_apple_oauth.auth.state import create_state

MOCK_VALID_CODE = "mock-valid-code"
MOCK_ACCESS_TOKEN = "gho_mockAccessToken"

MOCK_USER = GithubUser(
    id=424242,
    login="apple-mock-user",
    name="Apple Mock User",
    avatar_url="https://avatars.githubusercontent.com/u/424242?v=4",
    html_url="https://github.com/apple-mock-user",
    email=None,
)
MOCK_EMAILS = (
    GithubEmail(
        email="abc123xyz@privaterelay.appleid.com",
        primary=True,
        verified=True,
        visibility="private",
    ),
    GithubEmail(
        email="424242+apple-mock-user@users.noreply.github.com",
        primary=False,
        verified=True,
        visibility=None,
    ),
)


class MockAppleOAuthClient:
    """Mock implementation of OAuthClientProtocol.

    Codes:
        - "mock-valid-code" - authenticates as MOCK_USER
        - anything else - fails like GitHub's bad_verification_code
    """

    def __init__(self, redirect_uri: str) -> None:
        self._redirect_uri = redirect_uri
        self._authenticated_codes: list[str] = []

    def create_auth_url(self, state: str | None = None) -> AuthUrlResult:
        """Return a URL that lands directly on the callback with a valid code."""
        if state is None:
            state = create_state()
        params = {"code": MOCK_VALID_CODE, "state": state}
        return AuthUrlResult(url=f"{self._redirect_uri}?{urlencode(params)}", state=state)

    async def authenticate(self, code: str) -> AuthResult:
        self._authenticated_codes.append(code)
        if code != MOCK_VALID_CODE:
            raise GhAppleOAuthError(
                ErrorCode.TOKEN_EXCHANGE_FAILED,
                "The code passed is incorrect or expired.",
            )
        return AuthResult(
            access_token=MOCK_ACCESS_TOKEN,
            user=MOCK_USER,
            emails=list(MOCK_EMAILS),
        )

    # Test helper methods

    def get_authenticated_codes(self) -> list[str]:
        """Return every code passed to authenticate (for test assertions)."""
        return self._authenticated_codes.copy()

    def clear_authenticated_codes(self) -> None:
        self._authenticated_codes.clear()
