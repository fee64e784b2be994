"""Tests for gh_apple_oauth.config and the client factory.

Every test constructs Settings(_env_file=None, ...) or clears the cached
settings to avoid reading real .env files.
"""

from __future__ import annotations

import os
from functools import partial
from pathlib import Path

import pytest
from pydantic import SecretStr

from gh_apple_oauth.auth import ErrorCode, GhAppleOAuth, GhAppleOAuthError
from gh_apple_oauth.auth.factory import (
    build_oauth_config,
    clear_config_cache,
    get_oauth_client,
)
from gh_apple_oauth.auth.mock import MockAppleOAuthClient
from gh_apple_oauth.auth.models import OAuthConfig
from gh_apple_oauth.config import (
    AppConfig,
    DevConfig,
    GithubConfig,
    Settings,
    get_settings,
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove GITHUB__/APP__/DEV__ variables inherited from the shell."""
    for key in list(os.environ):
        if key.startswith(("GITHUB__", "APP__", "DEV__")):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(
        "gh_apple_oauth.config.Settings", partial(Settings, _env_file=None)
    )
    return monkeypatch


class TestDefaults:
    def test_defaults(self, clean_env) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.github.client_id == ""
        assert s.github.client_secret.get_secret_value() == ""
        assert s.github.scopes == "read:user user:email"
        assert s.github.allow_signup is False
        assert s.github.disable_signup is True
        assert s.app.port == 3000
        assert s.app.environment == "development"
        assert s.app.state_cookie_max_age == 600
        assert s.app.secure_cookies is False
        assert s.dev.auth_mock is False

    def test_secure_cookies_in_production(self) -> None:
        assert AppConfig(environment="production").secure_cookies is True


class TestEnvLoading:
    """Nested variables use the double-underscore delimiter."""

    def test_github_credentials_from_env(self, clean_env) -> None:
        clean_env.setenv("GITHUB__CLIENT_ID", "Iv1.env")
        clean_env.setenv("GITHUB__CLIENT_SECRET", "env-secret")
        clean_env.setenv("GITHUB__REDIRECT_URI", "https://app.example.com/cb")
        clean_env.setenv("GITHUB__SCOPES", "read:user,user:email repo")
        clean_env.setenv("GITHUB__ALLOW_SIGNUP", "true")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.github.client_id == "Iv1.env"
        assert s.github.client_secret.get_secret_value() == "env-secret"
        assert s.github.allow_signup is True
        assert build_oauth_config(s.github).scopes == ("read:user", "user:email", "repo")

    @pytest.mark.parametrize(("raw", "expected"), [("true", True), ("0", False)])
    def test_auth_mock_flag(self, clean_env, raw: str, expected: bool) -> None:
        clean_env.setenv("DEV__AUTH_MOCK", raw)
        assert Settings(_env_file=None).dev.auth_mock is expected  # type: ignore[call-arg]

    def test_secret_not_in_repr(self) -> None:
        s = Settings(
            _env_file=None,  # type: ignore[call-arg]
            github=GithubConfig(client_secret=SecretStr("hunter2")),
        )
        assert "hunter2" not in repr(s)

    def test_get_settings_is_cached(self, clean_env) -> None:
        assert get_settings() is get_settings()
        clear_config_cache()
        clean_env.setenv("APP__PORT", "8123")
        assert get_settings().app.port == 8123

    def test_default_env_file_is_project_root(self) -> None:
        env_file = Settings.model_config["env_file"]
        assert Path(str(env_file)).name == ".env"


class TestBuildOAuthConfig:
    def test_maps_all_fields(self) -> None:
        github = GithubConfig(
            client_id="id",
            client_secret=SecretStr("secret"),
            redirect_uri="https://app/cb",
            scopes="read:user",
            allow_signup=True,
            disable_signup=False,
        )

        assert build_oauth_config(github) == OAuthConfig(
            client_id="id",
            client_secret="secret",
            redirect_uri="https://app/cb",
            scopes=("read:user",),
            allow_signup=True,
            disable_signup=False,
        )

    def test_blank_scopes_fall_back_to_defaults(self) -> None:
        config = build_oauth_config(GithubConfig(scopes="  "))
        assert config.scopes == ("read:user", "user:email")


class TestGetOAuthClient:
    """Factory selection between the real and mock client."""

    def _use(self, monkeypatch: pytest.MonkeyPatch, settings: Settings) -> None:
        monkeypatch.setattr("gh_apple_oauth.auth.factory.get_settings", lambda: settings)

    def test_real_client(self, monkeypatch) -> None:
        self._use(
            monkeypatch,
            Settings(
                _env_file=None,  # type: ignore[call-arg]
                github=GithubConfig(
                    client_id="id",
                    client_secret=SecretStr("secret"),
                    redirect_uri="https://app/cb",
                ),
            ),
        )

        client = get_oauth_client()

        assert isinstance(client, GhAppleOAuth)
        assert client.config.client_secret == "secret"
        assert get_oauth_client() is client

    def test_mock_client(self, monkeypatch) -> None:
        self._use(
            monkeypatch,
            Settings(
                _env_file=None,  # type: ignore[call-arg]
                app=AppConfig(base_url="http://localhost:9999"),
                dev=DevConfig(auth_mock=True),
            ),
        )

        client = get_oauth_client()

        assert isinstance(client, MockAppleOAuthClient)
        assert client.create_auth_url().url.startswith(
            "http://localhost:9999/auth/apple/callback?"
        )

    def test_missing_credentials_raise_config_invalid(self, monkeypatch) -> None:
        self._use(
            monkeypatch,
            Settings(
                _env_file=None,  # type: ignore[call-arg]
                github=GithubConfig(client_id="id", redirect_uri="https://app/cb"),
            ),
        )

        with pytest.raises(GhAppleOAuthError) as exc_info:
            get_oauth_client()

        assert exc_info.value.code is ErrorCode.CONFIG_INVALID
        assert exc_info.value.message == "clientSecret is required"
