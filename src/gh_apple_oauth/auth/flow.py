"""Start and finish a sign-in against a StateStore.

Thin glue used by the HTTP routes: the state token goes into the store on
the way out and is consumed on the way back, before any call to GitHub.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gh_apple_oauth.auth.callback import consume_callback

if TYPE_CHECKING:
    from gh_apple_oauth.auth.models import AuthResult, CallbackQuery
    from gh_apple_oauth.auth.protocol import OAuthClientProtocol, StateStore

logger = logging.getLogger(__name__)

STATE_KEY = "ghOAuthState"
STATE_MAX_AGE_SECONDS = 60 * 10


def begin_login(
    client: OAuthClientProtocol,
    store: StateStore,
    max_age: int = STATE_MAX_AGE_SECONDS,
) -> str:
    """Create an authorization URL and persist its state.

    Returns:
        The URL to redirect the user-agent to.
    """
    result = client.create_auth_url()
    store.set(STATE_KEY, result.state, max_age)
    return result.url


async def complete_login(
    client: OAuthClientProtocol,
    query: CallbackQuery,
    store: StateStore,
) -> AuthResult:
    """Validate the callback, consume the saved state, then authenticate.

    Raises:
        GhAppleOAuthError: From validation, token exchange or profile fetch.
    """
    code = consume_callback(query, store, STATE_KEY)
    logger.debug("Callback state verified, authenticating")
    return await client.authenticate(code)
