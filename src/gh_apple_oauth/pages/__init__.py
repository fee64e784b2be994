"""HTTP surface for gh-apple-oauth.

Import this module to register the NiceGUI pages; the sign-in routes are
mounted with ``register_auth_routes``.
"""

from gh_apple_oauth.pages import auth, index
from gh_apple_oauth.pages.auth import register_auth_routes

__all__ = ["auth", "index", "register_auth_routes"]
