"""Auth cookie transport: access (ey-session), refresh (ey-refresh) and CSRF cookies.

All cookies are HttpOnly, SameSite=Lax, Path=/; Secure follows COOKIE_SECURE.
Clearing sets an empty value with an expiry in the past.
"""

import secrets
from datetime import datetime

from starlette.responses import Response

from engage.application.dtos.auth import TokenPair
from engage.core.config import get_settings

_EXPIRED = "Thu, 01 Jan 1970 00:00:00 GMT"


def _set(
    response: Response,
    name: str,
    value: str,
    *,
    max_age: int | None = None,
    expires: datetime | None = None,
) -> None:
    settings = get_settings()
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        expires=expires,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite="lax",
    )


def set_auth_cookies(response: Response, tokens: TokenPair) -> None:
    """Write the access and refresh cookies for a freshly issued pair."""
    settings = get_settings()
    if not settings.auth_cookies_enabled:
        return
    _set(response, settings.session_cookie_name, tokens.access_token, max_age=tokens.expires_in)
    _set(
        response,
        settings.refresh_cookie_name,
        tokens.refresh_token,
        expires=tokens.refresh_token_expires_at,
    )


def issue_csrf_cookie(response: Response) -> str:
    """Mint a CSRF token, set it as a cookie and return it for the response body."""
    settings = get_settings()
    token = secrets.token_urlsafe(32)
    _set(
        response,
        settings.csrf_cookie_name,
        token,
        max_age=settings.csrf_token_expire_minutes * 60,
    )
    return token


def clear_auth_cookies(response: Response) -> None:
    settings = get_settings()
    for name in (
        settings.session_cookie_name,
        settings.refresh_cookie_name,
        settings.csrf_cookie_name,
    ):
        response.set_cookie(
            key=name,
            value="",
            max_age=0,
            expires=_EXPIRED,
            path="/",
            secure=settings.cookie_secure,
            httponly=True,
            samesite="lax",
        )
