"""Auth API schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from engage.application.dtos.auth import AuthenticatedUser, LoginResult, TokenPair
from engage.domain.enums import Department


class RegisterRequest(BaseModel):
    """Request body for self-registration. The account starts inactive."""

    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=1)
    department: Department | None = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    """Mandatory first-login change as well as a voluntary one.

    Confirmation mismatch is reported by the service (400), not here.
    """

    email: EmailStr
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    """Refresh token in the body; the ey-refresh cookie is used when omitted."""

    refresh_token: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class CurrentUserResponse(BaseModel):
    """Identity, roles and effective flags (validate / me)."""

    id: str
    email: str
    full_name: str
    department: str | None = None
    roles: list[str]
    is_active: bool
    is_first_login: bool

    @classmethod
    def from_principal(cls, user: AuthenticatedUser) -> "CurrentUserResponse":
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            department=user.department,
            roles=sorted(user.roles),
            is_active=user.is_active,
            is_first_login=user.is_first_login,
        )


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token_expires_at: datetime

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokenResponse":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
            refresh_token_expires_at=pair.refresh_token_expires_at,
        )


class LoginResponse(BaseModel):
    """Login / change-password / refresh result.

    tokens is null and needs_password_change is true when the account must
    change its password before it can use the API.
    """

    user: CurrentUserResponse
    needs_password_change: bool
    tokens: TokenResponse | None = None

    @classmethod
    def from_result(cls, result: LoginResult) -> "LoginResponse":
        return cls(
            user=CurrentUserResponse.from_principal(result.user),
            needs_password_change=result.needs_password_change,
            tokens=TokenResponse.from_pair(result.tokens) if result.tokens else None,
        )


class MessageResponse(BaseModel):
    message: str


class CheckEmailResponse(BaseModel):
    exists: bool


class CsrfTokenResponse(BaseModel):
    csrf_token: str
