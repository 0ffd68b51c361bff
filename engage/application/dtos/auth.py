"""DTOs for authentication use cases (no dependency on ORM or HTTP)."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity, roles and effective flags of a user (no secrets)."""

    id: str
    email: str
    full_name: str
    department: str | None
    roles: frozenset[str]
    is_active: bool
    is_first_login: bool

    @property
    def needs_password_change(self) -> bool:
        return not self.is_active or self.is_first_login

    def has_any_role(self, allowed: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(allowed)


@dataclass(frozen=True)
class AccessClaims:
    """Decoded access-token claims."""

    user_id: str
    email: str
    full_name: str
    department: str | None
    roles: frozenset[str]
    is_active: bool
    is_first_login: bool
    session_id: str
    token_id: str


@dataclass(frozen=True)
class IssuedRefreshToken:
    """A freshly minted refresh token. raw goes to the client; token_hash is stored."""

    raw: str
    token_hash: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    """Access + refresh token pair returned by login, change-password and refresh."""

    access_token: str
    refresh_token: str
    expires_in: int
    refresh_token_expires_at: datetime
    token_type: str = "bearer"


@dataclass(frozen=True)
class LoginResult:
    """Outcome of login / change-password.

    tokens is None when the account must change its password first.
    """

    user: AuthenticatedUser
    tokens: TokenPair | None

    @property
    def needs_password_change(self) -> bool:
        return self.tokens is None
