import html
import re
from urllib.parse import parse_qs, urlparse


def _login_link(body):
    match = re.search(r'<a href="([^"]+)">Login with Google</a>', body)
    assert match, body
    return html.unescape(match.group(1))


def test_dashboard_without_session_redirects_to_login(client) -> None:
    r = client.get('/dashboard')
    assert r.status_code == 302
    assert urlparse(r.headers['Location']).path == '/'
    assert r.data == b''


def test_dashboard_with_empty_user_redirects(client) -> None:
    with client.session_transaction() as sess:
        sess['user'] = {}
    r = client.get('/dashboard')
    assert r.status_code == 302


def test_dashboard_shows_session_user(client, login_as) -> None:
    login_as()
    r = client.get('/dashboard')
    assert r.status_code == 200
    body = r.get_data(as_text=True)
    assert 'Welcome, Ada Lovelace!' in body
    assert 'Email: ada@example.com' in body
    assert 'src="https://example.com/ada.png"' in body
    assert 'href="/logout"' in body


def test_dashboard_escapes_user_fields(client, login_as) -> None:
    login_as(name='A&B', email='a@b.com', picture='http://x/y.png')
    body = client.get('/dashboard').get_data(as_text=True)
    assert 'A&amp;B' in body
    assert 'a@b.com' in body
    assert 'src="http://x/y.png"' in body


def test_dashboard_never_emits_raw_script(client, login_as) -> None:
    login_as(name='<script>alert(1)</script>', picture='"><script>x</script>')
    body = client.get('/dashboard').get_data(as_text=True)
    assert '<script>' not in body
    assert '&lt;script&gt;alert(1)&lt;/script&gt;' in body


def test_dashboard_without_picture_omits_image(client, login_as) -> None:
    login_as(picture=None)
    body = client.get('/dashboard').get_data(as_text=True)
    assert '<img' not in body


def test_login_link_has_configured_scopes_and_redirect_uri(client) -> None:
    r = client.get('/')
    assert r.status_code == 200
    url = urlparse(_login_link(r.get_data(as_text=True)))
    params = parse_qs(url.query)

    assert url.netloc == 'accounts.google.com'
    assert params['scope'] == ['email profile']
    assert params['redirect_uri'] == ['http://localhost/google-callback']
    assert params['client_id'] == ['test-client-id.apps.googleusercontent.com']
    assert params['response_type'] == ['code']


def test_login_page_stores_state_in_session(client) -> None:
    body = client.get('/').get_data(as_text=True)
    params = parse_qs(urlparse(_login_link(body)).query)
    with client.session_transaction() as sess:
        assert sess['oauth_state'] == params['state'][0]


def test_login_page_uses_configured_scopes(app, client) -> None:
    app.config['OAUTH_SCOPES'] = ['openid', 'email']
    body = client.get('/').get_data(as_text=True)
    params = parse_qs(urlparse(_login_link(body)).query)
    assert params['scope'] == ['openid email']


def test_render_dashboard_reads_explicit_session(app) -> None:
    from flask_google_login import render_dashboard

    store = {'user': {'name': 'Grace', 'email': 'grace@example.com', 'picture': 'https://p/g.png'}}
    with app.test_request_context('/dashboard'):
        body = render_dashboard(store)
    assert 'Welcome, Grace!' in body

    with app.test_request_context('/dashboard'):
        response = render_dashboard({})
    assert response.status_code == 302
