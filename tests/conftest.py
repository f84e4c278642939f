"""Shared fixtures: an app wired with test OAuth settings and its client."""

import pytest

from flask_google_login import create_app

TEST_CONFIG = {
    'TESTING': True,
    'USE_SECRET_MANAGER': False,
    'SECRET_KEY': 'test-secret-key-for-testing-purposes-only',
    'GOOGLE_CLIENT_ID': 'test-client-id.apps.googleusercontent.com',
    'GOOGLE_CLIENT_SECRET': 'test-client-secret',
    'REDIRECT_URI': 'http://localhost/google-callback',
}


@pytest.fixture
def app():
    app = create_app(dict(TEST_CONFIG))
    # the test client talks plain http
    app.config['SESSION_COOKIE_SECURE'] = False
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login_as(client):
    """Put a user into the client's session."""
    def _login(name='Ada Lovelace', email='ada@example.com', picture='https://example.com/ada.png'):
        with client.session_transaction() as sess:
            sess['user'] = {'name': name, 'email': email, 'picture': picture}
    return _login
