"""Current-user and role dependencies.

The access token comes from the Authorization bearer header or, failing
that, the ey-session cookie. Every request re-checks the token's session
id against the stored one (TokenService.validate_access_token).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from engage.application.dtos.auth import AuthenticatedUser
from engage.application.services.token_service import TokenService
from engage.api.v1.dependencies.services import get_token_service
from engage.core.config import get_settings
from engage.domain.enums import ADMIN_ROLES, APPROVER_ROLES
from engage.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    EngageException,
    UnauthorizedException,
)
from engage.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


def extract_access_token(
    request: Request, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    if credentials and credentials.credentials:
        return credentials.credentials
    settings = get_settings()
    if settings.auth_cookies_enabled:
        return request.cookies.get(settings.session_cookie_name) or None
    return None


async def get_authenticated_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AuthenticatedUser:
    """Validated principal, which may still need to change its password."""
    token = extract_access_token(request, credentials)
    if not token:
        raise AuthenticationException("Not authenticated")
    return await token_service.validate_access_token(token)


async def get_optional_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AuthenticatedUser | None:
    """Principal when the request carries a still-valid token, else None."""
    token = extract_access_token(request, credentials)
    if not token:
        return None
    try:
        return await token_service.validate_access_token(token)
    except EngageException as e:
        logger.info("Ignoring unusable access token: %s", e.error_code)
        return None


async def get_current_user(
    user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)],
) -> AuthenticatedUser:
    """Principal allowed to use the API (active and past first login)."""
    if user.needs_password_change:
        raise UnauthorizedException("Password change required")
    return user


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


def require_roles(
    allowed: Iterable[str], resource: str, action: str
) -> Callable[..., Awaitable[AuthenticatedUser]]:
    """Dependency factory: current user must hold one of the allowed roles."""
    allowed_roles = frozenset(allowed)

    async def _require(user: CurrentUser) -> AuthenticatedUser:
        if not user.has_any_role(allowed_roles):
            raise AuthorizationException(resource, action)
        return user

    return _require


Approver = Annotated[AuthenticatedUser, Depends(require_roles(APPROVER_ROLES, "event", "approve"))]
Admin = Annotated[AuthenticatedUser, Depends(require_roles(ADMIN_ROLES, "user", "manage"))]
