"""Callback validation.

Checks run in a fixed order: a provider-reported error wins over
everything (on a denial the state cookie may legitimately be gone), then
required parameters, then the CSRF state. The code is only returned once
the state has matched.
"""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING

from gh_apple_oauth.auth.errors import ErrorCode, GhAppleOAuthError

if TYPE_CHECKING:
    from gh_apple_oauth.auth.models import CallbackQuery
    from gh_apple_oauth.auth.protocol import StateStore


def _states_match(saved_state: str | None, presented: str) -> bool:
    if not saved_state:
        return False
    # Exact byte comparison, no normalisation
    return hmac.compare_digest(saved_state.encode(), presented.encode())


def validate_callback(query: CallbackQuery, saved_state: str | None) -> str:
    """Validate an OAuth callback against the saved state.

    Args:
        query: The callback's query parameters.
        saved_state: The state persisted when the flow started, or None.

    Returns:
        The authorization code.

    Raises:
        GhAppleOAuthError: ``oauth_denied``, ``invalid_callback`` or
            ``invalid_state``.
    """
    if query.error:
        raise GhAppleOAuthError(
            ErrorCode.OAUTH_DENIED,
            query.error_description or "OAuth denied",
            provider_error=query.error,
            error_uri=query.error_uri,
        )

    if not query.code or not query.state:
        raise GhAppleOAuthError(ErrorCode.INVALID_CALLBACK, "Missing code or state")

    if not _states_match(saved_state, query.state):
        raise GhAppleOAuthError(ErrorCode.INVALID_STATE, "State does not match")

    return query.code


def consume_callback(query: CallbackQuery, store: StateStore, key: str) -> str:
    """Validate a callback against ``store`` and invalidate the saved state.

    The saved state is deleted as soon as it has matched, so a replayed
    callback fails with ``invalid_state``.

    Returns:
        The authorization code.
    """
    code = validate_callback(query, store.get(key))
    store.delete(key)
    return code
