"""
Google Login Example for Flask

This module provides:
1. A landing page linking to Google's OAuth consent screen
2. The OAuth callback that stores the signed-in user in the session
3. A session-gated dashboard that redirects anonymous visitors to the login page

OAuth credentials come from environment variables, falling back to
Google Cloud Secret Manager.
"""

from .app import create_app
from .auth import get_current_user, is_authenticated
from .config import Config
from .pages import render_dashboard, render_login_page

__version__ = "0.1.0"
__all__ = [
    "Config",
    "create_app",
    "get_current_user",
    "is_authenticated",
    "render_dashboard",
    "render_login_page",
]
