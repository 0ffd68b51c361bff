"""User repository: the credential store.

Identity lookups, password checks and changes, reset tokens and role
membership. Mutations report failures as IdentityResult instead of
raising, so callers decide how to surface them.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from engage.application.dtos.identity import IdentityResult
from engage.infrastructure.persistence.models.role import Role, UserRole
from engage.infrastructure.persistence.models.user import User
from engage.infrastructure.persistence.repositories.base import BaseRepository
from engage.infrastructure.persistence.repositories.password_reset_token_repo import (
    DEFAULT_TOKEN_TTL_SECONDS,
    PasswordResetTokenStore,
)
from engage.infrastructure.security.password import PasswordHasher, password_hasher
from engage.infrastructure.security.password_policy import (
    DEFAULT_PASSWORD_POLICY,
    PasswordPolicy,
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Credential store over app_user, user_role and password_reset_token."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        password_policy: PasswordPolicy = DEFAULT_PASSWORD_POLICY,
        reset_token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
        hasher: PasswordHasher = password_hasher,
    ) -> None:
        super().__init__(db, User)
        self._policy = password_policy
        self._hasher = hasher
        self._reset_tokens = PasswordResetTokenStore(db, ttl_seconds=reset_token_ttl_seconds)

    # ---- lookups ----

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalar_one_or_none()

    async def get_by_refresh_token_hash(self, token_hash: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.refresh_token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def list_users(self, skip: int = 0, limit: int = 100) -> list[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    # ---- passwords ----

    async def authenticate(self, email: str, password: str) -> User | None:
        """Return the user when the password matches; None otherwise.

        Activation flags are not checked here; the auth workflow decides what an
        inactive account may do. A decoy hash is checked when the email is
        unknown so both failure paths cost one bcrypt check.
        """
        user = await self.get_by_email(email)
        if not user:
            await self._hasher.burn(password)
            return None
        if not await self.check_password(user, password):
            return None
        return user

    async def check_password(self, user: User, password: str) -> bool:
        return await self._hasher.matches(password, user.hashed_password)

    async def _apply_new_password(self, user: User, new_password: str) -> IdentityResult:
        errors = self._policy.validate(new_password)
        if errors:
            return IdentityResult.failed(*errors)
        user.hashed_password = await self._hasher.hash(new_password)
        await self.db.flush()
        return IdentityResult.success(user.id)

    async def change_password(
        self, user: User, current_password: str, new_password: str
    ) -> IdentityResult:
        if not await self.check_password(user, current_password):
            return IdentityResult.failed("Incorrect password.")
        return await self._apply_new_password(user, new_password)

    async def set_password(self, user: User, new_password: str) -> IdentityResult:
        """Administrative password set: no current password or reset token required."""
        return await self._apply_new_password(user, new_password)

    async def generate_reset_token(self, user: User) -> tuple[str, datetime]:
        return await self._reset_tokens.create(user.id)

    async def reset_password(
        self, user: User, token: str, new_password: str
    ) -> IdentityResult:
        """Redeem a reset token and set the new password (policy checked first)."""
        errors = self._policy.validate(new_password)
        if errors:
            return IdentityResult.failed(*errors)
        if not await self._reset_tokens.redeem(user.id, token):
            return IdentityResult.failed("Invalid token.")
        return await self._apply_new_password(user, new_password)

    # ---- create ----

    async def create_user(
        self,
        *,
        email: str,
        full_name: str,
        password: str,
        department: str | None = None,
        fonction: str | None = None,
        sector: str | None = None,
        phone_number: str | None = None,
        roles: Iterable[str] = (),
        is_active: bool = False,
        is_first_login: bool = True,
    ) -> IdentityResult:
        """Create a user with the given roles. Duplicate email or weak password fails."""
        email = normalize_email(email)
        errors = self._policy.validate(password)
        if errors:
            return IdentityResult.failed(*errors)
        if await self.get_by_email(email):
            return IdentityResult.failed(f"Email '{email}' is already taken.")
        role_rows = await self._get_roles_by_name(roles)
        missing = set(roles) - {r.name for r in role_rows}
        if missing:
            return IdentityResult.failed(
                *(f"Role {name} does not exist." for name in sorted(missing))
            )
        hashed = await self._hasher.hash(password)
        user = User(
            email=email,
            full_name=full_name.strip(),
            hashed_password=hashed,
            department=department,
            fonction=fonction,
            sector=sector,
            phone_number=phone_number,
            is_active=is_active,
            is_first_login=is_first_login,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(user)
                await self.db.flush()
                for role in role_rows:
                    self.db.add(UserRole(user_id=user.id, role_id=role.id))
                await self.db.flush()
        except IntegrityError:
            return IdentityResult.failed(f"Email '{email}' is already taken.")
        await self.db.refresh(user)
        return IdentityResult.success(user.id)

    # ---- roles ----

    async def _get_roles_by_name(self, names: Iterable[str]) -> list[Role]:
        wanted = list(set(names))
        if not wanted:
            return []
        result = await self.db.execute(select(Role).where(Role.name.in_(wanted)))
        return list(result.scalars().all())

    async def get_roles(self, user_id: str) -> list[str]:
        result = await self.db.execute(
            select(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.name)
        )
        return list(result.scalars().all())

    async def get_roles_for_users(self, user_ids: Iterable[str]) -> dict[str, list[str]]:
        ids = list(set(user_ids))
        roles: dict[str, list[str]] = {uid: [] for uid in ids}
        if not ids:
            return roles
        result = await self.db.execute(
            select(UserRole.user_id, Role.name)
            .join(Role, UserRole.role_id == Role.id)
            .where(UserRole.user_id.in_(ids))
            .order_by(Role.name)
        )
        for user_id, name in result.all():
            roles[user_id].append(name)
        return roles

    async def add_role(self, user_id: str, role_name: str) -> IdentityResult:
        roles = await self._get_roles_by_name([role_name])
        if not roles:
            return IdentityResult.failed(f"Role {role_name} does not exist.")
        role = roles[0]
        existing = await self.db.execute(
            select(func.count())
            .select_from(UserRole)
            .where(UserRole.user_id == user_id, UserRole.role_id == role.id)
        )
        if existing.scalar_one():
            return IdentityResult.failed(f"User already in role '{role_name}'.")
        try:
            async with self.db.begin_nested():
                self.db.add(UserRole(user_id=user_id, role_id=role.id))
                await self.db.flush()
        except IntegrityError:
            return IdentityResult.failed(f"User already in role '{role_name}'.")
        return IdentityResult.success(user_id)

    # ---- session state ----

    async def set_session(
        self,
        user: User,
        session_id: str | None,
        refresh_token_hash: str | None = None,
        refresh_token_expires_at: datetime | None = None,
    ) -> User:
        """Overwrite session id and refresh token (last writer wins)."""
        user.session_id = session_id
        user.refresh_token_hash = refresh_token_hash
        user.refresh_token_expires_at = refresh_token_expires_at
        await self.db.flush()
        return user

    async def clear_session(self, user: User) -> None:
        """Drop session id and refresh token inside a savepoint.

        A failure here rolls back only the savepoint, so the caller may log it
        and let the outer transaction continue.
        """
        async with self.db.begin_nested():
            user.session_id = None
            user.refresh_token_hash = None
            user.refresh_token_expires_at = None
            await self.db.flush()
