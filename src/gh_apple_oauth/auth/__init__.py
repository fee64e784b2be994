"""Apple sign-in via GitHub OAuth.

Provides the full authorization-code flow against GitHub's Apple bridge:
- CSRF state generation and callback validation
- Apple-initiate authorization URL construction
- Code-for-token exchange and concurrent profile retrieval
- Mock client for testing

Usage:
    from gh_apple_oauth.auth import GhAppleOAuth, OAuthConfig, validate_callback

    auth = GhAppleOAuth(OAuthConfig(client_id=..., client_secret=..., redirect_uri=...))

    # Redirect to Apple sign-in, keep result.state in a cookie
    result = auth.create_auth_url()

    # In the callback handler
    code = validate_callback(CallbackQuery.from_mapping(params), saved_state)
    auth_result = await auth.authenticate(code)
"""

from __future__ import annotations

from gh_apple_oauth.auth.callback import consume_callback, validate_callback
from gh_apple_oauth.auth.client import GhAppleOAuth, exchange_code, get_profile
from gh_apple_oauth.auth.errors import ErrorCode, GhAppleOAuthError
from gh_apple_oauth.auth.factory import clear_config_cache, get_oauth_client
from gh_apple_oauth.auth.flow import begin_login, complete_login
from gh_apple_oauth.auth.models import (
    AuthResult,
    AuthUrlResult,
    CallbackQuery,
    GithubEmail,
    GithubProfile,
    GithubUser,
    OAuthConfig,
)
from gh_apple_oauth.auth.protocol import OAuthClientProtocol, StateStore
from gh_apple_oauth.auth.state import MemoryStateStore, create_state
from gh_apple_oauth.auth.urls import create_auth_url

__all__ = [
    "AuthResult",
    "AuthUrlResult",
    "CallbackQuery",
    "ErrorCode",
    "GhAppleOAuth",
    "GhAppleOAuthError",
    "GithubEmail",
    "GithubProfile",
    "GithubUser",
    "MemoryStateStore",
    "OAuthClientProtocol",
    "OAuthConfig",
    "StateStore",
    "begin_login",
    "clear_config_cache",
    "complete_login",
    "consume_callback",
    "create_auth_url",
    "create_state",
    "exchange_code",
    "get_oauth_client",
    "get_profile",
    "validate_callback",
]
