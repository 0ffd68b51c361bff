"""In-memory stand-ins (credential store, principals) shared by the unit and API tests."""

from __future__ import annotations

import secrets
from collections.abc import Iterable
from datetime import datetime, timedelta

from engage.application.dtos.auth import AuthenticatedUser
from engage.application.dtos.identity import IdentityResult
from engage.domain.enums import RoleName
from engage.infrastructure.persistence.models.user import User
from engage.infrastructure.security.password_policy import DEFAULT_PASSWORD_POLICY
from engage.shared.utils.datetime import utc_now


class FakeUserRepository:
    """Implements the UserRepository methods the auth workflow calls."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.passwords: dict[str, str] = {}
        self.roles: dict[str, list[str]] = {}
        self.reset_tokens: dict[str, str] = {}
        self._next_id = 0

    def add(
        self,
        email: str,
        password: str,
        roles: Iterable[str] = ("EmployeeEY",),
        *,
        is_active: bool = True,
        is_first_login: bool = False,
        full_name: str = "Jane Doe",
    ) -> User:
        self._next_id += 1
        user = User(
            id=f"user-{self._next_id}",
            email=email.lower(),
            full_name=full_name,
            hashed_password="not-used",
            department="Consulting",
            is_active=is_active,
            is_first_login=is_first_login,
            session_id=None,
            refresh_token_hash=None,
            refresh_token_expires_at=None,
            created_at=utc_now(),
        )
        self.users[user.id] = user
        self.passwords[user.id] = password
        self.roles[user.id] = list(roles)
        return user

    async def get_by_id(self, user_id: str) -> User | None:
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email.lower()), None)

    async def get_by_refresh_token_hash(self, token_hash: str) -> User | None:
        return next(
            (u for u in self.users.values() if u.refresh_token_hash == token_hash), None
        )

    async def get_roles(self, user_id: str) -> list[str]:
        return list(self.roles.get(user_id, []))

    async def authenticate(self, email: str, password: str) -> User | None:
        user = await self.get_by_email(email)
        if user is None or self.passwords[user.id] != password:
            return None
        return user

    async def check_password(self, user: User, password: str) -> bool:
        return self.passwords[user.id] == password

    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> IdentityResult:
        if self.passwords[user.id] != current_password:
            return IdentityResult.failed("Incorrect password.")
        errors = DEFAULT_PASSWORD_POLICY.validate(new_password)
        if errors:
            return IdentityResult.failed(*errors)
        self.passwords[user.id] = new_password
        return IdentityResult.success(user.id)

    async def create_user(
        self,
        *,
        email: str,
        full_name: str,
        password: str,
        department: str | None = None,
        roles: Iterable[str] = (),
        is_active: bool = False,
        is_first_login: bool = True,
        **_: object,
    ) -> IdentityResult:
        if await self.get_by_email(email):
            return IdentityResult.failed(f"Email '{email}' is already taken.")
        errors = DEFAULT_PASSWORD_POLICY.validate(password)
        if errors:
            return IdentityResult.failed(*errors)
        user = self.add(
            email,
            password,
            roles,
            is_active=is_active,
            is_first_login=is_first_login,
            full_name=full_name,
        )
        user.department = department
        return IdentityResult.success(user.id)

    async def generate_reset_token(self, user: User) -> tuple[str, datetime]:
        token = secrets.token_urlsafe(16)
        self.reset_tokens[token] = user.id
        return token, utc_now() + timedelta(hours=1)

    async def reset_password(self, user: User, token: str, new_password: str) -> IdentityResult:
        errors = DEFAULT_PASSWORD_POLICY.validate(new_password)
        if errors:
            return IdentityResult.failed(*errors)
        if self.reset_tokens.pop(token, None) != user.id:
            return IdentityResult.failed("Invalid token.")
        self.passwords[user.id] = new_password
        return IdentityResult.success(user.id)

    async def set_session(
        self,
        user: User,
        session_id: str | None,
        refresh_token_hash: str | None = None,
        refresh_token_expires_at: datetime | None = None,
    ) -> User:
        user.session_id = session_id
        user.refresh_token_hash = refresh_token_hash
        user.refresh_token_expires_at = refresh_token_expires_at
        return user

    async def clear_session(self, user: User) -> None:
        await self.set_session(user, None)

    async def update(self, user: User) -> User:
        return user

    async def add_role(self, user_id: str, role_name: str) -> IdentityResult:
        roles = self.roles.setdefault(user_id, [])
        if role_name in roles:
            return IdentityResult.failed(f"User already in role '{role_name}'.")
        roles.append(role_name)
        return IdentityResult.success(user_id)


def make_principal(
    user_id: str = "user-1",
    roles: tuple[str, ...] = (RoleName.EMPLOYEE_EY.value,),
    *,
    email: str = "jane.doe@ey.com",
    is_active: bool = True,
    is_first_login: bool = False,
) -> AuthenticatedUser:
    return AuthenticatedUser(
        id=user_id,
        email=email,
        full_name="Jane Doe",
        department="Consulting",
        roles=frozenset(roles),
        is_active=is_active,
        is_first_login=is_first_login,
    )
