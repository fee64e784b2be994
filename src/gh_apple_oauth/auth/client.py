"""GitHub OAuth client for Apple sign-in.

Uses GitHub's undocumented ``/sessions/social/apple/initiate`` endpoint to
skip the "choose login method" screen and go straight to Apple sign-in.
No Apple Developer account is required: GitHub acts as the Apple OIDC
client, and this module only ever speaks the standard GitHub OAuth
protocol (token exchange plus the REST user endpoints).

Every request goes through ``httpx.AsyncClient``. Pass your own client to
share a connection pool or to stub GitHub in tests; otherwise a client is
opened and closed per operation.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import httpx

from gh_apple_oauth.auth.errors import ErrorCode, GhAppleOAuthError
from gh_apple_oauth.auth.models import (
    AuthResult,
    AuthUrlResult,
    GithubAccessTokenResponse,
    GithubEmail,
    GithubProfile,
    GithubUser,
    OAuthConfig,
)
from gh_apple_oauth.auth.urls import create_auth_url

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)

GITHUB_TOKEN_ENDPOINT = "https://github.com/login/oauth/access_token"
GITHUB_USER_ENDPOINT = "https://api.github.com/user"
GITHUB_USER_EMAILS_ENDPOINT = "https://api.github.com/user/emails"

_TOKEN_EXCHANGE_FALLBACK = "Unable to exchange code for access token"


@asynccontextmanager
async def _http_client(
    client: httpx.AsyncClient | None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the caller's client, or a fresh one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as owned:
        yield owned


# ---------------------------------------------------------------------------
# Standalone helpers (exported for functional usage)
# ---------------------------------------------------------------------------


async def exchange_code(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    code: str,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> str:
    """Exchange a GitHub OAuth authorization code for an access token.

    GitHub may answer HTTP 200 with an error body, so success needs both
    a 2xx status and a non-empty ``access_token``.

    Returns:
        The access token string.

    Raises:
        GhAppleOAuthError: ``token_exchange_failed`` on a rejected exchange,
            a transport error, or a body that is not a JSON object.
    """
    logger.debug("Exchanging authorization code for access token")
    try:
        async with _http_client(http_client) as client:
            response = await client.post(
                GITHUB_TOKEN_ENDPOINT,
                headers={"Accept": "application/json"},
                data={
                    "client_id": client_id,
                    "client_secret": client_secret,
                    "code": code,
                    "redirect_uri": redirect_uri,
                },
            )
    except httpx.HTTPError as e:
        raise GhAppleOAuthError(
            ErrorCode.TOKEN_EXCHANGE_FAILED, _TOKEN_EXCHANGE_FALLBACK
        ) from e

    try:
        body = response.json()
    except ValueError as e:
        raise GhAppleOAuthError(
            ErrorCode.TOKEN_EXCHANGE_FAILED,
            _TOKEN_EXCHANGE_FALLBACK,
            status_code=response.status_code,
        ) from e

    payload = GithubAccessTokenResponse.from_payload(
        body if isinstance(body, dict) else {}
    )

    if not response.is_success or not payload.access_token:
        message = payload.error_description or payload.error or _TOKEN_EXCHANGE_FALLBACK
        raise GhAppleOAuthError(
            ErrorCode.TOKEN_EXCHANGE_FAILED,
            message,
            error_uri=payload.error_uri,
            status_code=response.status_code,
        )

    return payload.access_token


def _read_json(
    outcome: httpx.Response | BaseException,
    code: ErrorCode,
    label: str,
) -> Any:
    """Turn one gathered response into its JSON body or a tagged error."""
    if isinstance(outcome, BaseException):
        if not isinstance(outcome, httpx.HTTPError):
            raise outcome
        raise GhAppleOAuthError(code, f"GitHub {label} endpoint request failed") from outcome

    if not outcome.is_success:
        raise GhAppleOAuthError(
            code,
            f"GitHub {label} endpoint returned {outcome.status_code}",
            status_code=outcome.status_code,
        )

    try:
        return outcome.json()
    except ValueError as e:
        raise GhAppleOAuthError(
            code,
            f"GitHub {label} endpoint returned invalid JSON",
            status_code=outcome.status_code,
        ) from e


def _parse_user(body: Any) -> GithubUser:
    try:
        return GithubUser.from_payload(body)
    except (KeyError, TypeError, AttributeError) as e:
        raise GhAppleOAuthError(
            ErrorCode.PROFILE_FETCH_FAILED,
            "GitHub user endpoint returned an unexpected payload",
        ) from e


def _parse_emails(body: Any) -> list[GithubEmail]:
    if not isinstance(body, list):
        raise GhAppleOAuthError(
            ErrorCode.EMAILS_FETCH_FAILED,
            "GitHub emails endpoint returned an unexpected payload",
        )
    try:
        return [GithubEmail.from_payload(entry) for entry in body]
    except (KeyError, TypeError, AttributeError) as e:
        raise GhAppleOAuthError(
            ErrorCode.EMAILS_FETCH_FAILED,
            "GitHub emails endpoint returned an unexpected payload",
        ) from e


async def get_profile(
    access_token: str,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> GithubProfile:
    """Fetch the GitHub user profile and emails for an access token.

    Both endpoints are requested concurrently and joined before either
    result is looked at. The user response is read and parsed before the
    emails response, so when both are bad the error is
    ``profile_fetch_failed``.

    Raises:
        GhAppleOAuthError: ``profile_fetch_failed`` or ``emails_fetch_failed``.
    """
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Accept": "application/vnd.github+json",
    }

    logger.debug("Fetching GitHub user and emails")
    async with _http_client(http_client) as client:
        user_res, emails_res = await asyncio.gather(
            client.get(GITHUB_USER_ENDPOINT, headers=headers),
            client.get(GITHUB_USER_EMAILS_ENDPOINT, headers=headers),
            return_exceptions=True,
        )

    user = _parse_user(_read_json(user_res, ErrorCode.PROFILE_FETCH_FAILED, "user"))
    emails = _parse_emails(
        _read_json(emails_res, ErrorCode.EMAILS_FETCH_FAILED, "emails")
    )

    return GithubProfile(user=user, emails=emails)


# ---------------------------------------------------------------------------
# Class-based client
# ---------------------------------------------------------------------------


class GhAppleOAuth:
    """Apple OAuth via GitHub, bound to one OAuth App configuration.

    Implements OAuthClientProtocol.

    Example::

        auth = GhAppleOAuth(
            OAuthConfig(
                client_id="your_github_client_id",
                client_secret="your_github_client_secret",
                redirect_uri="http://localhost:3000/auth/apple/callback",
            )
        )

        # 1. Redirect the user to Apple sign-in, remember the state
        result = auth.create_auth_url()

        # 2. In the callback handler, after validate_callback()
        auth_result = await auth.authenticate(code)
    """

    def __init__(
        self,
        config: OAuthConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Validate the configuration and bind it to the client.

        Args:
            config: OAuth App credentials and flow options.
            http_client: Optional shared client; the caller owns its lifetime.

        Raises:
            GhAppleOAuthError: ``config_invalid`` if client_id, client_secret
                or redirect_uri is empty.
        """
        if not config.client_id:
            raise GhAppleOAuthError(ErrorCode.CONFIG_INVALID, "clientId is required")
        if not config.client_secret:
            raise GhAppleOAuthError(ErrorCode.CONFIG_INVALID, "clientSecret is required")
        if not config.redirect_uri:
            raise GhAppleOAuthError(ErrorCode.CONFIG_INVALID, "redirectUri is required")

        self._config = config
        self._http_client = http_client

    @property
    def config(self) -> OAuthConfig:
        return self._config

    def create_auth_url(self, state: str | None = None) -> AuthUrlResult:
        """Generate the Apple-via-GitHub authorization URL and a CSRF state.

        Store ``state`` in a cookie or session, then redirect the user to ``url``.
        """
        return create_auth_url(
            client_id=self._config.client_id,
            redirect_uri=self._config.redirect_uri,
            scopes=self._config.scopes,
            allow_signup=self._config.allow_signup,
            disable_signup=self._config.disable_signup,
            state=state,
        )

    async def exchange_code(self, code: str) -> str:
        """Exchange an authorization code for a GitHub access token."""
        return await exchange_code(
            self._config.client_id,
            self._config.client_secret,
            self._config.redirect_uri,
            code,
            http_client=self._http_client,
        )

    async def get_profile(self, access_token: str) -> GithubProfile:
        """Fetch the GitHub profile (user + emails) for an access token."""
        return await get_profile(access_token, http_client=self._http_client)

    async def authenticate(self, code: str) -> AuthResult:
        """Exchange the code, then fetch the profile.

        Returns:
            AuthResult including the access token and profile data.
        """
        access_token = await self.exchange_code(code)
        profile = await self.get_profile(access_token)

        logger.debug("Authenticated GitHub user %s", profile.user.login)
        return AuthResult(
            access_token=access_token,
            user=profile.user,
            emails=profile.emails,
        )
