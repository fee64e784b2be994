"""Error type raised by every gh-apple-oauth operation."""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Machine-readable failure kinds."""

    CONFIG_INVALID = "config_invalid"
    OAUTH_DENIED = "oauth_denied"
    INVALID_CALLBACK = "invalid_callback"
    INVALID_STATE = "invalid_state"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    PROFILE_FETCH_FAILED = "profile_fetch_failed"
    EMAILS_FETCH_FAILED = "emails_fetch_failed"


class GhAppleOAuthError(Exception):
    """An OAuth flow step failed.

    Attributes:
        code: The failure kind.
        message: Human-readable description, safe to show to the user.
        provider_error: The ``error`` value GitHub sent on the callback
            (only for ``oauth_denied``).
        error_uri: The ``error_uri`` GitHub sent on the callback, if any.
        status_code: Upstream HTTP status for fetch failures, if known.
    """

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        provider_error: str | None = None,
        error_uri: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.code = ErrorCode(code)
        self.message = message
        self.provider_error = provider_error
        self.error_uri = error_uri
        self.status_code = status_code
        super().__init__(message)

    def __repr__(self) -> str:
        return f"GhAppleOAuthError(code={self.code.value!r}, message={self.message!r})"
