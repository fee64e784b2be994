"""Apple sign-in routes.

``GET /auth/apple`` stores a CSRF state cookie and redirects to Apple
sign-in through GitHub; ``GET /auth/apple/callback`` verifies the state,
exchanges the code and returns the GitHub profile as JSON. Uses either the
real GitHub client or MockAppleOAuthClient based on DEV__AUTH_MOCK.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from gh_apple_oauth.auth import (
    CallbackQuery,
    ErrorCode,
    GhAppleOAuthError,
    OAuthClientProtocol,
    begin_login,
    complete_login,
    get_oauth_client,
)
from gh_apple_oauth.config import Settings, get_settings

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")

OAuthClient = Annotated[OAuthClientProtocol, Depends(get_oauth_client)]
AppSettings = Annotated[Settings, Depends(get_settings)]


class CookieStateStore:
    """StateStore backed by request/response cookies.

    Reads come from the incoming request. Writes and deletes are recorded
    and take effect in this request immediately; ``apply`` copies them onto
    the outgoing response as Set-Cookie headers.
    """

    def __init__(self, request: Request, *, secure: bool) -> None:
        self._cookies: dict[str, str] = dict(request.cookies)
        self._secure = secure
        self._pending: dict[str, tuple[str, int] | None] = {}

    def set(self, key: str, value: str, max_age: int) -> None:
        self._cookies[key] = value
        self._pending[key] = (value, max_age)

    def get(self, key: str) -> str | None:
        return self._cookies.get(key) or None

    def delete(self, key: str) -> None:
        self._cookies.pop(key, None)
        self._pending[key] = None

    def apply(self, response: Response) -> Response:
        for key, entry in self._pending.items():
            if entry is None:
                response.delete_cookie(
                    key,
                    path="/",
                    secure=self._secure,
                    httponly=True,
                    samesite="lax",
                )
            else:
                value, max_age = entry
                response.set_cookie(
                    key,
                    value,
                    max_age=max_age,
                    path="/",
                    secure=self._secure,
                    httponly=True,
                    samesite="lax",
                )
        return response


def _error_body(exc: GhAppleOAuthError) -> dict[str, Any]:
    body: dict[str, Any] = {"error": exc.code.value, "errorDescription": exc.message}
    if exc.provider_error:
        body["providerError"] = exc.provider_error
    return body


def error_response(exc: GhAppleOAuthError) -> JSONResponse:
    """Map an OAuth error to an HTTP response.

    Configuration problems are the server's fault (500); everything else
    is a rejected sign-in (400).
    """
    if exc.code is ErrorCode.CONFIG_INVALID:
        return JSONResponse(
            status_code=500,
            content={"error": "server_misconfigured", "errorDescription": exc.message},
        )
    return JSONResponse(status_code=400, content=_error_body(exc))


async def _handle_oauth_error(
    request: Request, exc: GhAppleOAuthError
) -> JSONResponse:
    logger.error("OAuth request to %s failed: %r", request.url.path, exc)
    return error_response(exc)


@router.get("/apple")
async def apple_login(
    request: Request,
    client: OAuthClient,
    settings: AppSettings,
) -> Response:
    """Start the Apple sign-in flow."""
    store = CookieStateStore(request, secure=settings.app.secure_cookies)
    url = begin_login(client, store, max_age=settings.app.state_cookie_max_age)
    logger.info("Starting Apple sign-in via GitHub")
    return store.apply(RedirectResponse(url, status_code=302))


@router.get("/apple/callback")
async def apple_callback(
    request: Request,
    client: OAuthClient,
    settings: AppSettings,
) -> Response:
    """Handle GitHub's redirect back after Apple sign-in."""
    logger.info("Apple sign-in callback received")
    query = CallbackQuery.from_mapping(request.query_params)
    store = CookieStateStore(request, secure=settings.app.secure_cookies)

    try:
        result = await complete_login(client, query, store)
    except GhAppleOAuthError as e:
        logger.warning("Apple sign-in failed: %s (%s)", e.code.value, e.message)
        return store.apply(error_response(e))

    logger.info(
        "Login successful: login=%s, github_id=%s, emails=%d",
        result.user.login,
        result.user.id,
        len(result.emails),
    )
    # The access token stays server-side
    return store.apply(JSONResponse(result.to_dict(include_token=False)))


def register_auth_routes(app: FastAPI) -> None:
    """Mount the sign-in routes and the OAuth error handler on ``app``."""
    app.include_router(router)
    app.add_exception_handler(GhAppleOAuthError, _handle_oauth_error)  # type: ignore[arg-type]
