"""Auth API: registration, login, password lifecycle, refresh and logout.

Tokens are returned in the body and, when AUTH_COOKIES_ENABLED, also set as
HttpOnly cookies (ey-session / ey-refresh). Refresh falls back to the
ey-refresh cookie when the body carries no token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response

from engage.api.v1.dependencies import (
    AuthQueryDep,
    AuthServiceDep,
    get_authenticated_user,
    get_optional_user,
)
from engage.application.dtos.auth import AuthenticatedUser
from engage.core.config import get_settings
from engage.core.cookies import clear_auth_cookies, issue_csrf_cookie, set_auth_cookies
from engage.core.limiter import limit_auth
from engage.schemas.auth import (
    ChangePasswordRequest,
    CheckEmailResponse,
    CsrfTokenResponse,
    CurrentUserResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    ResetPasswordRequest,
)

router = APIRouter()

Principal = Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
OptionalPrincipal = Annotated[AuthenticatedUser | None, Depends(get_optional_user)]


@router.post("/register", response_model=CurrentUserResponse, status_code=201)
@limit_auth
async def register(request: Request, body: RegisterRequest, auth: AuthServiceDep):
    """Self-registration. The account stays inactive until the first password change."""
    user = await auth.register(
        full_name=body.full_name,
        email=body.email,
        password=body.password,
        department=body.department.value if body.department else None,
    )
    return CurrentUserResponse.from_principal(user)


@router.post("/login", response_model=LoginResponse)
@limit_auth
async def login(request: Request, response: Response, body: LoginRequest, auth: AuthServiceDep):
    """Authenticate. No tokens are issued while a password change is pending."""
    result = await auth.login(body.email, body.password)
    if result.tokens is not None:
        set_auth_cookies(response, result.tokens)
    return LoginResponse.from_result(result)


@router.post("/change-password", response_model=LoginResponse)
@limit_auth
async def change_password(
    request: Request, response: Response, body: ChangePasswordRequest, auth: AuthServiceDep
):
    result = await auth.change_password(
        email=body.email,
        current_password=body.current_password,
        new_password=body.new_password,
        confirm_password=body.confirm_password,
    )
    if result.tokens is not None:
        set_auth_cookies(response, result.tokens)
    return LoginResponse.from_result(result)


@router.post("/refresh", response_model=LoginResponse)
@limit_auth
async def refresh(
    request: Request,
    response: Response,
    auth: AuthServiceDep,
    body: RefreshRequest | None = None,
):
    """Rotate the session and issue a new pair. Failure clears the auth cookies."""
    token = body.refresh_token if body else None
    if not token:
        token = request.cookies.get(get_settings().refresh_cookie_name)
    result = await auth.refresh(token)
    if result.tokens is not None:
        set_auth_cookies(response, result.tokens)
    return LoginResponse.from_result(result)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, user: OptionalPrincipal, auth: AuthServiceDep):
    """End the current session and clear all auth cookies.

    Always succeeds: an expired or superseded token only skips the session reset.
    """
    if user is not None:
        await auth.logout(user.id)
    clear_auth_cookies(response)
    return MessageResponse(message="Logged out")


@router.post("/forgot-password", response_model=MessageResponse)
@limit_auth
async def forgot_password(request: Request, body: ForgotPasswordRequest, auth: AuthServiceDep):
    """Always succeeds so the response does not reveal whether the email exists."""
    await auth.forgot_password(body.email)
    return MessageResponse(message="If the account exists, a reset link has been sent")


@router.post("/reset-password", response_model=MessageResponse)
@limit_auth
async def reset_password(request: Request, body: ResetPasswordRequest, auth: AuthServiceDep):
    await auth.reset_password(body.email, body.token, body.new_password)
    return MessageResponse(message="Password has been reset")


@router.get("/validate", response_model=CurrentUserResponse)
async def validate(user: Principal, auth: AuthQueryDep):
    """Validate the access token (header or cookie) and return its principal."""
    return CurrentUserResponse.from_principal(await auth.current_user(user))


@router.get("/me", response_model=CurrentUserResponse)
async def me(user: Principal, auth: AuthQueryDep):
    return CurrentUserResponse.from_principal(await auth.current_user(user))


@router.get("/check-email", response_model=CheckEmailResponse)
@limit_auth
async def check_email(request: Request, auth: AuthQueryDep, email: str = Query(..., min_length=3)):
    return CheckEmailResponse(exists=await auth.check_email(email))


@router.get("/csrf-token", response_model=CsrfTokenResponse)
async def csrf_token(response: Response):
    """Issue a CSRF token cookie for the frontend.

    The token is issued for clients that send it back as a header; the API
    itself does not verify it (SameSite=Lax cookies plus bearer tokens).
    """
    return CsrfTokenResponse(csrf_token=issue_csrf_cookie(response))
