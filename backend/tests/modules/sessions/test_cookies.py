from datetime import datetime, timezone

from fastapi import Response

from modules.sessions.cookies import clear_refresh_cookie, set_refresh_cookie
from modules.sessions.models import IssuedSession
from shared.config import Settings


def _session() -> IssuedSession:
    return IssuedSession(
        user_id="user-1",
        access_token="access",
        refresh_token="raw-refresh",
        refresh_expires_at=datetime.now(timezone.utc),
    )


def test_set_refresh_cookie_attributes():
    response = Response()
    set_refresh_cookie(response, _session(), Settings(_env_file=None, environment="development"))

    cookie = response.headers["set-cookie"]
    assert cookie.startswith("refresh_token=raw-refresh")
    assert "HttpOnly" in cookie
    assert "Path=/api/auth" in cookie
    assert "SameSite=lax" in cookie
    assert "Max-Age=604800" in cookie
    assert "Secure" not in cookie


def test_secure_in_production():
    response = Response()
    set_refresh_cookie(response, _session(), Settings(_env_file=None, environment="production"))
    assert "Secure" in response.headers["set-cookie"]


def test_clear_refresh_cookie_expires_it():
    response = Response()
    clear_refresh_cookie(response, Settings(_env_file=None))

    cookie = response.headers["set-cookie"]
    assert cookie.startswith('refresh_token=""')
    assert "Max-Age=0" in cookie
    assert "Path=/api/auth" in cookie
