"""
Login and dashboard pages.

Templates are rendered through Jinja with autoescaping, so session values
never reach the page unescaped.
"""

from flask import current_app, redirect, render_template_string, session, url_for

from .auth import get_authorization_url, get_current_user, is_authenticated

LOGIN_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <title>Google Login Example</title>
</head>
<body>
    <h2>Login with Google</h2>
    <a href="{{ login_url }}">Login with Google</a>
</body>
</html>
"""

DASHBOARD_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <title>Dashboard</title>
</head>
<body>
    <h1>Welcome, {{ user.name }}!</h1>
    <p>Email: {{ user.email }}</p>
    {% if user.picture %}
    <img src="{{ user.picture }}" alt="Profile Picture">
    {% endif %}
    <br><br>
    <a href="{{ url_for('logout') }}">Logout</a>
</body>
</html>
"""


def render_login_page():
    """
    Render the landing page with a link to Google's consent screen.

    The OAuth state (and PKCE verifier, when one is issued) is kept in the
    session so the callback can resume the same flow.
    """
    login_url, state, code_verifier = get_authorization_url()
    session['oauth_state'] = state
    if code_verifier:
        session['oauth_code_verifier'] = code_verifier
    else:
        session.pop('oauth_code_verifier', None)

    return render_template_string(LOGIN_TEMPLATE, login_url=login_url)


def render_dashboard(store):
    """
    Render the dashboard for the user held in ``store``.

    Args:
        store: Session mapping for the current request

    Returns:
        A redirect to the login page when no user is signed in, otherwise
        the dashboard HTML.
    """
    if not is_authenticated(store):
        current_app.logger.info("Dashboard requested without a session, redirecting to login")
        response = redirect(url_for('login_page'))
        response.set_data(b'')
        return response

    return render_template_string(DASHBOARD_TEMPLATE, user=get_current_user(store))


def setup_page_routes(app):
    """
    Register the login page and dashboard routes.

    Args:
        app: Flask application instance
    """

    @app.route('/')
    def login_page():
        return render_login_page()

    @app.route('/dashboard')
    def dashboard():
        return render_dashboard(session)
