"""
Google OAuth login for Flask applications.

Builds the consent-screen URL, completes the callback, and keeps the signed-in
user in the session under ``user``.
"""

import os

from flask import current_app, redirect, request, session, url_for
from google.auth.transport import requests
from google.oauth2 import id_token
from google_auth_oauthlib.flow import Flow

USERINFO_URL = 'https://openidconnect.googleapis.com/v1/userinfo'


class OAuthStateError(Exception):
    """Raised when OAuth state parameter validation fails.

    This could indicate a CSRF attack attempt or expired OAuth flow.
    """
    pass


def get_google_flow(state=None, code_verifier=None):
    """
    Create and return a Google OAuth flow.

    Args:
        state: OAuth state to resume (callback side)
        code_verifier: PKCE verifier issued with the authorization URL

    Returns:
        Flow: Configured Google OAuth flow
    """
    config = current_app.extensions['flask_google_login']
    oauth_config = config.get_oauth_config()

    client_config = {
        "web": {
            "client_id": oauth_config['client_id'],
            "client_secret": oauth_config['client_secret'],
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": [oauth_config['redirect_uri']],
        }
    }

    flow = Flow.from_client_config(
        client_config=client_config,
        scopes=oauth_config['scopes'],
        state=state,
        code_verifier=code_verifier,
    )
    flow.redirect_uri = oauth_config['redirect_uri']

    return flow


def get_authorization_url():
    """
    Generate Google OAuth authorization URL.

    Returns:
        tuple: (authorization_url, state, code_verifier)
    """
    flow = get_google_flow()
    authorization_url, state = flow.authorization_url(
        access_type='online',
        prompt='select_account'
    )

    return authorization_url, state, flow.code_verifier


def fetch_user_info(flow):
    """Read the signed-in identity after the token exchange."""
    credentials = flow.credentials

    if credentials.id_token:
        return id_token.verify_oauth2_token(
            credentials.id_token,
            requests.Request(),
            current_app.extensions['flask_google_login'].get_client_id()
        )

    current_app.logger.info("No ID token in token response, querying userinfo endpoint")
    response = flow.authorized_session().get(USERINFO_URL)
    response.raise_for_status()
    return response.json()


def verify_oauth_callback(state, code):
    """
    Verify OAuth callback and exchange code for tokens.

    Args:
        state: OAuth state parameter
        code: Authorization code from Google

    Returns:
        dict: User information including email, name, and picture

    Raises:
        OAuthStateError: If state doesn't match or verification fails
    """
    expected_state = session.get('oauth_state')
    if not state or state != expected_state:
        current_app.logger.warning(
            f"OAuth state mismatch - possible CSRF attempt. "
            f"Expected: {expected_state}, Got: {state}, "
            f"IP: {request.remote_addr}"
        )
        session.pop('oauth_state', None)
        session.pop('oauth_code_verifier', None)
        raise OAuthStateError("Invalid authentication state - please try logging in again")

    flow = get_google_flow(state=state, code_verifier=session.get('oauth_code_verifier'))
    flow.fetch_token(code=code)

    id_info = fetch_user_info(flow)

    return {
        'email': id_info.get('email'),
        'name': id_info.get('name'),
        'picture': id_info.get('picture'),
        'email_verified': id_info.get('email_verified', False),
    }


def is_authenticated(store=None):
    """
    Check if a user is signed in.

    Args:
        store: Session mapping to inspect; defaults to the request session

    Returns:
        bool: True if the session holds a user, False otherwise
    """
    if store is None:
        store = session
    return bool(store.get('user'))


def get_current_user(store=None):
    """
    Get current authenticated user information.

    Returns:
        dict: User information or None if not authenticated
    """
    if store is None:
        store = session
    if not is_authenticated(store):
        return None

    user = store['user']
    return {
        'name': user.get('name'),
        'email': user.get('email'),
        'picture': user.get('picture'),
    }


def login_user(user_info):
    """
    Log in a user by storing their information in the session.

    Args:
        user_info: Dictionary with user information (email, name, picture)
    """
    session['user'] = {
        'name': user_info.get('name'),
        'email': user_info.get('email'),
        'picture': user_info.get('picture'),
    }
    session.pop('oauth_state', None)
    session.pop('oauth_code_verifier', None)
    session.permanent = True


def logout_user():
    """Log out the current user."""
    session.pop('user', None)


def setup_auth_routes(app):
    """
    Set up the OAuth callback and logout routes for the Flask app.

    Args:
        app: Flask application instance
    """
    # Google answers short scopes ("email") with their full URLs plus "openid"
    os.environ.setdefault('OAUTHLIB_RELAX_TOKEN_SCOPE', '1')

    @app.route(app.config.get('CALLBACK_PATH', '/google-callback'))
    def google_callback():
        """Handle OAuth callback from Google."""
        state = request.args.get('state')
        code = request.args.get('code')
        error = request.args.get('error')

        if error:
            current_app.logger.info(f"Google returned an OAuth error: {error}")
            return f"Authentication error: {error}", 400

        try:
            user_info = verify_oauth_callback(state, code)

            if not user_info.get('email_verified'):
                current_app.logger.warning(f"Rejected unverified email: {user_info.get('email')}")
                return "Email not verified", 403

            login_user(user_info)
            current_app.logger.info(f"User {user_info.get('email')} logged in")
            return redirect(url_for('dashboard'))

        except OAuthStateError as e:
            return f"Authentication failed: {str(e)}", 400
        except Exception as e:
            current_app.logger.error(f"Authentication error: {e}")
            return f"Authentication failed: {str(e)}", 500

    @app.route('/logout')
    def logout():
        """Log out the current user."""
        logout_user()
        return redirect(url_for('login_page'))
