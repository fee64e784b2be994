"""Data models for the Apple-via-GitHub OAuth flow.

These dataclasses represent configuration, provider payloads and the
outcome of a completed sign-in, shared by the real client and the mock.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Literal

DEFAULT_SCOPES: tuple[str, ...] = ("read:user", "user:email")


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class OAuthConfig:
    """Configuration for a GhAppleOAuth client.

    Attributes:
        client_id: GitHub OAuth App client ID.
        client_secret: GitHub OAuth App client secret.
        redirect_uri: Callback URL registered with the GitHub OAuth App.
        scopes: GitHub OAuth scopes to request.
        allow_signup: Whether GitHub may offer account creation.
        disable_signup: Whether to disable signup on the Apple sign-in step.
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: tuple[str, ...] = DEFAULT_SCOPES
    allow_signup: bool = False
    disable_signup: bool = True


@dataclass(frozen=True)
class AuthUrlResult:
    """Result of building an authorization URL.

    Attributes:
        url: Where to redirect the user-agent (straight to Apple sign-in).
        state: CSRF token embedded in ``url``. Persist it and compare it
            on the callback.
    """

    url: str
    state: str


@dataclass(frozen=True)
class CallbackQuery:
    """Query parameters GitHub sends to the redirect URI. All untrusted."""

    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None
    error_uri: str | None = None

    @classmethod
    def from_mapping(cls, params: Mapping[str, Any]) -> CallbackQuery:
        """Build from a request's query mapping, ignoring unknown keys."""
        return cls(
            code=_opt_str(params.get("code")),
            state=_opt_str(params.get("state")),
            error=_opt_str(params.get("error")),
            error_description=_opt_str(params.get("error_description")),
            error_uri=_opt_str(params.get("error_uri")),
        )


@dataclass(frozen=True)
class GithubAccessTokenResponse:
    """Body of the token endpoint response.

    GitHub answers 200 with only the ``error*`` fields set when the
    exchange is rejected.
    """

    access_token: str | None = None
    token_type: str | None = None
    scope: str | None = None
    error: str | None = None
    error_description: str | None = None
    error_uri: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GithubAccessTokenResponse:
        return cls(
            access_token=_opt_str(payload.get("access_token")),
            token_type=_opt_str(payload.get("token_type")),
            scope=_opt_str(payload.get("scope")),
            error=_opt_str(payload.get("error")),
            error_description=_opt_str(payload.get("error_description")),
            error_uri=_opt_str(payload.get("error_uri")),
        )


@dataclass(frozen=True)
class GithubUser:
    """The authenticated GitHub user (``GET /user``)."""

    id: int
    login: str
    name: str | None
    avatar_url: str
    html_url: str
    email: str | None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GithubUser:
        return cls(
            id=payload["id"],
            login=payload["login"],
            name=payload.get("name"),
            avatar_url=payload["avatar_url"],
            html_url=payload["html_url"],
            email=payload.get("email"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GithubEmail:
    """One entry of ``GET /user/emails``."""

    email: str
    primary: bool
    verified: bool
    visibility: str | None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> GithubEmail:
        return cls(
            email=payload["email"],
            primary=bool(payload.get("primary", False)),
            verified=bool(payload.get("verified", False)),
            visibility=payload.get("visibility"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GithubProfile:
    """User record plus email list, fetched together."""

    user: GithubUser
    emails: list[GithubEmail] = field(default_factory=list)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a completed sign-in.

    Attributes:
        access_token: GitHub bearer token. Not stored anywhere by this
            package; the caller owns it.
        user: The GitHub user the Apple ID is linked to.
        emails: The user's email addresses as GitHub reports them.
        provider: Always ``"github"``.
        method: Always ``"apple"``.
    """

    access_token: str
    user: GithubUser
    emails: list[GithubEmail] = field(default_factory=list)
    provider: Literal["github"] = "github"
    method: Literal["apple"] = "apple"

    def to_dict(self, *, include_token: bool = True) -> dict[str, Any]:
        """Serialise for a JSON response."""
        data: dict[str, Any] = {
            "provider": self.provider,
            "method": self.method,
        }
        if include_token:
            data["accessToken"] = self.access_token
        data["user"] = self.user.to_dict()
        data["emails"] = [email.to_dict() for email in self.emails]
        return data
