"""DTOs for user and role administration (no dependency on ORM)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserResult:
    """User read-model (no password, no session secrets)."""

    id: str
    email: str
    full_name: str
    department: str | None
    fonction: str | None
    sector: str | None
    phone_number: str | None
    is_active: bool
    is_first_login: bool
    roles: list[str]
    created_at: datetime


@dataclass(frozen=True)
class CreateUserCommand:
    """Admin-side user creation input. A temporary password is generated."""

    email: str
    full_name: str
    department: str | None = None
    fonction: str | None = None
    sector: str | None = None
    phone_number: str | None = None
    roles: tuple[str, ...] = ()


@dataclass(frozen=True)
class RoleResult:
    id: str
    name: str
