"""gh-apple-oauth - Sign in with Apple through GitHub's OAuth flow.

GitHub can authenticate its users with their Apple ID. This service sends
the user straight into that Apple sign-in and completes an ordinary GitHub
OAuth authorization-code flow, so the relying app never talks to Apple.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def _setup_logging(log_dir: Path) -> None:
    """Configure logging to both console and rotating file."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"gh_apple_oauth.{os.getpid()}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())


def main() -> None:
    """Entry point for the gh-apple-oauth service."""
    from nicegui import app, ui

    from gh_apple_oauth.auth import get_oauth_client
    from gh_apple_oauth.config import get_settings
    from gh_apple_oauth.pages import register_auth_routes

    settings = get_settings()
    _setup_logging(settings.app.log_dir)

    # Fail fast on missing GITHUB__* credentials, before serving anything
    client = get_oauth_client()
    logging.info("OAuth client ready: %s", type(client).__name__)

    register_auth_routes(app)

    port = settings.app.port
    print(f"gh-apple-oauth v{__version__}")
    print(f"Starting application on http://0.0.0.0:{port}")

    reload = os.environ.get("GH_APPLE_OAUTH_RELOAD", "1") != "0"
    ui.run(
        host="0.0.0.0",  # nosec B104
        port=port,
        reload=reload,
        storage_secret=settings.app.storage_secret.get_secret_value(),
        title="gh-apple-oauth",
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
