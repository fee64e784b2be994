"""OAuth client factory.

Provides a factory function to get the appropriate OAuth client
based on configuration (real GitHub or mock for testing).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gh_apple_oauth.auth.models import DEFAULT_SCOPES, OAuthConfig
from gh_apple_oauth.config import GithubConfig, get_settings

if TYPE_CHECKING:
    from gh_apple_oauth.auth.protocol import OAuthClientProtocol


# Cached client instance, built once from settings
_client_instance: OAuthClientProtocol | None = None


def build_oauth_config(github: GithubConfig) -> OAuthConfig:
    """Build the immutable client configuration from GITHUB__* settings.

    Missing credentials are passed through unchanged; GhAppleOAuth
    rejects them with ``config_invalid``.
    """
    scopes = tuple(github.scopes.replace(",", " ").split())
    return OAuthConfig(
        client_id=github.client_id,
        client_secret=github.client_secret.get_secret_value(),
        redirect_uri=github.redirect_uri,
        scopes=scopes or DEFAULT_SCOPES,
        allow_signup=github.allow_signup,
        disable_signup=github.disable_signup,
    )


def get_oauth_client() -> OAuthClientProtocol:
    """Get the appropriate OAuth client based on configuration.

    If DEV__AUTH_MOCK=true, returns MockAppleOAuthClient.
    Otherwise, returns GhAppleOAuth with the GITHUB__* credentials.
    The instance is cached, so configuration is validated on first call.

    Returns:
        A client implementing OAuthClientProtocol.

    Raises:
        GhAppleOAuthError: ``config_invalid`` if mock mode is disabled and
            GITHUB__CLIENT_ID, GITHUB__CLIENT_SECRET or GITHUB__REDIRECT_URI
            is empty.
    """
    global _client_instance  # noqa: PLW0603
    if _client_instance is not None:
        return _client_instance

    settings = get_settings()

    if settings.dev.auth_mock:
        from gh_apple_oauth.auth.mock import MockAppleOAuthClient

        redirect_uri = (
            settings.github.redirect_uri
            or f"{settings.app.base_url}/auth/apple/callback"
        )
        _client_instance = MockAppleOAuthClient(redirect_uri=redirect_uri)
        return _client_instance

    from gh_apple_oauth.auth.client import GhAppleOAuth

    _client_instance = GhAppleOAuth(build_oauth_config(settings.github))
    return _client_instance


def clear_config_cache() -> None:
    """Clear the configuration and client caches.

    Useful for testing when you need to reload configuration.
    """
    global _client_instance  # noqa: PLW0603
    get_settings.cache_clear()
    _client_instance = None
