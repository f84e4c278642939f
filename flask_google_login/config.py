"""Configuration management for flask_google_login module.

Handles OAuth client settings and Secret Manager integration.
If an environment variable is not set, the library will automatically attempt
to fetch from Secret Manager using the same name as the environment variable.
"""

import os
import secrets
from datetime import timedelta
from typing import Optional

import google.auth
from google.cloud import secretmanager

DEFAULT_SCOPES = ['email', 'profile']

RESOLVED_KEYS = ('GOOGLE_CLIENT_ID', 'GOOGLE_CLIENT_SECRET', 'REDIRECT_URI', 'SECRET_KEY')


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off', '')


class Config:
    """Configuration manager for the flask_google_login module."""

    def __init__(self, app=None):
        """
        Initialize configuration.

        Args:
            app: Flask application instance (optional)
        """
        self.app = app

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """
        Initialize the Flask application with this config.

        Values already present on ``app.config`` win. Anything missing is
        resolved up front from:
        1. Environment variables
        2. Google Cloud Secret Manager (if env var not set and enabled)
        3. None (if neither available)

        Args:
            app: Flask application instance
        """
        self.app = app
        app.extensions['flask_google_login'] = self

        app.config.setdefault('USE_SECRET_MANAGER', _env_flag('USE_SECRET_MANAGER', True))
        for name in RESOLVED_KEYS:
            if not app.config.get(name):
                app.config[name] = self._resolve_config(name)
        app.logger.info("Configuration initialized for flask_google_login")

        # Set Flask secret key with fallback to auto-generation
        if not app.secret_key:
            app.logger.warning(
                "No SECRET_KEY configured. Auto-generating one, but this will invalidate "
                "sessions on restart. Set SECRET_KEY environment variable or store in Secret Manager."
            )
            app.secret_key = secrets.token_hex(32)

        app.config.setdefault('OAUTH_SCOPES', list(DEFAULT_SCOPES))
        app.config.setdefault('CALLBACK_PATH', '/google-callback')

        # Flask ships its own defaults for these, so override only the stock values
        self._override_flask_default(app, 'SESSION_COOKIE_SECURE', not app.debug)  # HTTPS only in production
        self._override_flask_default(app, 'SESSION_COOKIE_HTTPONLY', True)
        self._override_flask_default(app, 'SESSION_COOKIE_SAMESITE', 'Lax')
        self._override_flask_default(app, 'PERMANENT_SESSION_LIFETIME', timedelta(hours=24))

    @staticmethod
    def _override_flask_default(app, name, value):
        if app.config.get(name) == app.default_config.get(name):
            app.config[name] = value

    def _resolve_config(self, name: str) -> Optional[str]:
        """
        Resolve configuration value from environment variable or Secret Manager.

        Tries in order:
        1. Environment variable
        2. Secret Manager (using same name), unless USE_SECRET_MANAGER is off
        3. Returns None if neither available

        Args:
            name: The name to use for both env var and Secret Manager secret

        Returns:
            The configuration value or None if not found
        """
        value = os.getenv(name)
        if value:
            self.app.logger.info(f"Loaded {name} from environment variable")
            return value

        if not self.app.config.get('USE_SECRET_MANAGER'):
            self.app.logger.debug(f"Environment variable {name} not set and Secret Manager disabled")
            return None

        self.app.logger.info(f"Environment variable {name} not set, trying Secret Manager")
        try:
            value = self.get_secret(name)
            self.app.logger.info(f"Successfully loaded {name} from Secret Manager (length: {len(value)})")
            return value
        except Exception as e:
            self.app.logger.debug(f"Could not load {name} from Secret Manager: {type(e).__name__}: {e}")
            return None

    def get_secret(self, secret_id: str, project_id: Optional[str] = None) -> str:
        """
        Retrieve a secret from Google Cloud Secret Manager.

        Uses Application Default Credentials (ADC) to automatically determine
        the project if not explicitly provided.

        Args:
            secret_id: The ID of the secret to retrieve
            project_id: GCP project ID (optional, uses ADC if not provided)

        Returns:
            The secret value as a string
        """
        if not project_id:
            credentials, project_id = google.auth.default()

            if not project_id and hasattr(credentials, 'quota_project_id'):
                project_id = credentials.quota_project_id

            if not project_id:
                project_id = os.getenv('GOOGLE_CLOUD_PROJECT') or os.getenv('GCP_PROJECT') or os.getenv('GCLOUD_PROJECT')

            if not project_id:
                raise ValueError(
                    "Cannot determine GCP project ID. Either:\n"
                    "  - Run 'gcloud config set project YOUR_PROJECT_ID'\n"
                    "  - Set GOOGLE_CLOUD_PROJECT environment variable\n"
                    "  - Provide project_id parameter"
                )

        with secretmanager.SecretManagerServiceClient() as client:
            name = f"projects/{project_id}/secrets/{secret_id}/versions/latest"
            self.app.logger.debug(f"Accessing secret: {name}")
            response = client.access_secret_version(request={"name": name})
            return response.payload.data.decode('UTF-8')

    def get_client_id(self) -> str:
        """
        Get Google OAuth client ID from config (resolved from env var or Secret Manager).

        Raises:
            ValueError: If not configured
        """
        client_id = self.app.config.get('GOOGLE_CLIENT_ID')

        if not client_id:
            raise ValueError(
                "Google OAuth client ID not configured. Set either:\n"
                "  - GOOGLE_CLIENT_ID environment variable, or\n"
                "  - Store client ID in Secret Manager as 'GOOGLE_CLIENT_ID'"
            )

        return client_id

    def get_client_secret(self) -> str:
        """
        Get Google OAuth client secret from config (resolved from env var or Secret Manager).

        Raises:
            ValueError: If not configured
        """
        client_secret = self.app.config.get('GOOGLE_CLIENT_SECRET')

        if not client_secret:
            raise ValueError(
                "Google OAuth client secret not configured. Set either:\n"
                "  - GOOGLE_CLIENT_SECRET environment variable, or\n"
                "  - Store client secret in Secret Manager as 'GOOGLE_CLIENT_SECRET'"
            )

        return client_secret

    def get_redirect_uri(self) -> str:
        redirect_uri = self.app.config.get('REDIRECT_URI')

        if not redirect_uri:
            raise ValueError(
                "Redirect URI not configured. Set either:\n"
                "  - REDIRECT_URI environment variable, or\n"
                "  - Store redirect URI in Secret Manager as 'REDIRECT_URI'"
            )

        return redirect_uri

    def get_scopes(self) -> list:
        return list(self.app.config.get('OAUTH_SCOPES') or DEFAULT_SCOPES)

    def get_oauth_config(self) -> dict:
        """
        Get OAuth configuration.

        Returns:
            Dictionary with client_id, client_secret, redirect_uri and scopes
        """
        return {
            'client_id': self.get_client_id(),
            'client_secret': self.get_client_secret(),
            'redirect_uri': self.get_redirect_uri(),
            'scopes': self.get_scopes(),
        }
