"""Landing page."""

from __future__ import annotations

from nicegui import ui


@ui.page("/")
async def index_page() -> None:
    """Service status with a sign-in link."""
    ui.label("Apple OAuth service is running").classes("text-2xl font-bold mb-4")
    ui.link("Sign in with Apple", "/auth/apple").props(
        'data-testid="apple-login-link"'
    )
