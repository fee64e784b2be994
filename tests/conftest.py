"""Shared pytest fixtures for gh-apple-oauth tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import httpx
import pytest
import pytest_asyncio

from gh_apple_oauth.auth.factory import clear_config_cache
from gh_apple_oauth.auth.models import OAuthConfig
from tests.helpers.github_stub import GithubStub


@pytest.fixture
def github() -> GithubStub:
    """A fresh GitHub stub with no routes."""
    return GithubStub()


@pytest_asyncio.fixture
async def http_client(github: GithubStub) -> AsyncIterator[httpx.AsyncClient]:
    """AsyncClient whose transport is the GitHub stub."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(github.handle)) as client:
        yield client


@pytest.fixture
def oauth_config() -> OAuthConfig:
    return OAuthConfig(
        client_id="Iv1.abc123",
        client_secret="shh-secret",
        redirect_uri="http://localhost:3000/auth/apple/callback",
    )


@pytest.fixture(autouse=True)
def _reset_client_cache() -> Iterator[None]:
    """Never leak a cached client or settings between tests."""
    clear_config_cache()
    yield
    clear_config_cache()
