"""
Refresh token cookie transport.

The raw refresh token only ever travels in this cookie: HttpOnly,
SameSite=Lax, Secure in production, scoped to the auth routes.
"""

from typing import Optional

from fastapi import Request, Response

from shared.config import Settings, get_settings

from .models import IssuedSession


def set_refresh_cookie(
    response: Response,
    session: IssuedSession,
    settings: Optional[Settings] = None,
) -> None:
    settings = settings or get_settings()
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=session.refresh_token,
        max_age=settings.refresh_token_ttl_days * 24 * 60 * 60,
        path=settings.refresh_cookie_path,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_refresh_cookie(response: Response, settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path=settings.refresh_cookie_path,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def read_refresh_cookie(request: Request, settings: Optional[Settings] = None) -> Optional[str]:
    settings = settings or get_settings()
    return request.cookies.get(settings.refresh_cookie_name)
