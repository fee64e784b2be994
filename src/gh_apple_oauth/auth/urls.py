"""Authorization URL construction.

GitHub's Apple bridge is entered through
``/sessions/social/apple/initiate``. Its ``return_to`` parameter carries the
ordinary ``/login/oauth/authorize`` path, so after Apple sign-in GitHub
continues straight into the OAuth consent for our app without showing the
"choose login method" screen. The authorize query string is therefore
URL-encoded once on its own and a second time as the ``return_to`` value.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import parse_qsl, urlencode, urlsplit

from gh_apple_oauth.auth.errors import ErrorCode, GhAppleOAuthError
from gh_apple_oauth.auth.models import DEFAULT_SCOPES, AuthUrlResult
from gh_apple_oauth.auth.state import create_state

GITHUB_AUTHORIZE_PATH = "/login/oauth/authorize"
GITHUB_APPLE_INITIATE = "https://github.com/sessions/social/apple/initiate"


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_authorize_path(
    client_id: str,
    redirect_uri: str,
    state: str,
    scopes: Sequence[str] = DEFAULT_SCOPES,
    *,
    allow_signup: bool = False,
) -> str:
    """Build the relative GitHub authorize path with its query string."""
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": " ".join(scopes),
        "state": state,
        "allow_signup": _flag(allow_signup),
    }
    return f"{GITHUB_AUTHORIZE_PATH}?{urlencode(params)}"


def build_apple_initiate_url(authorize_path: str, *, disable_signup: bool = True) -> str:
    """Wrap an authorize path in the Apple-initiate endpoint."""
    params = {
        "disable_signup": _flag(disable_signup),
        "return_to": authorize_path,
    }
    return f"{GITHUB_APPLE_INITIATE}?{urlencode(params)}"


def create_auth_url(
    client_id: str,
    redirect_uri: str,
    scopes: Sequence[str] | None = None,
    allow_signup: bool = False,
    disable_signup: bool = True,
    state: str | None = None,
) -> AuthUrlResult:
    """Build the full Apple-via-GitHub authorization URL.

    Args:
        client_id: GitHub OAuth App client ID.
        redirect_uri: Registered callback URL.
        scopes: Scopes to request (default: read:user, user:email).
        allow_signup: Let GitHub offer account creation.
        disable_signup: Disable signup on the Apple step.
        state: CSRF state to embed; generated when omitted.

    Returns:
        AuthUrlResult with the URL to redirect to and the state to verify later.

    Raises:
        GhAppleOAuthError: ``config_invalid`` if client_id or redirect_uri
            is empty.
    """
    if not client_id:
        raise GhAppleOAuthError(ErrorCode.CONFIG_INVALID, "clientId is required")
    if not redirect_uri:
        raise GhAppleOAuthError(ErrorCode.CONFIG_INVALID, "redirectUri is required")

    if state is None:
        state = create_state()
    if scopes is None:
        scopes = DEFAULT_SCOPES

    authorize_path = build_authorize_path(
        client_id,
        redirect_uri,
        state,
        scopes,
        allow_signup=allow_signup,
    )
    url = build_apple_initiate_url(authorize_path, disable_signup=disable_signup)
    return AuthUrlResult(url=url, state=state)


def extract_authorize_params(url: str) -> dict[str, str]:
    """Decode the authorize parameters nested in an Apple-initiate URL.

    Returns:
        The inner query parameters (client_id, redirect_uri, scope, state,
        allow_signup) as a dict.

    Raises:
        ValueError: If the URL has no ``return_to`` parameter.
    """
    outer = dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))
    return_to = outer.get("return_to")
    if return_to is None:
        msg = f"No return_to parameter in {url!r}"
        raise ValueError(msg)
    return dict(parse_qsl(urlsplit(return_to).query, keep_blank_values=True))
