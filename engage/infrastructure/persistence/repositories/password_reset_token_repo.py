"""One-time password reset token store (Postgres)."""

from __future__ import annotations

import hashlib
import secrets
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from engage.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken,
)
from engage.shared.utils.datetime import utc_now

DEFAULT_TOKEN_TTL_SECONDS = 3600


class PasswordResetTokenStore:
    """Create and redeem one-time reset tokens. Only the SHA-256 of a token is stored."""

    def __init__(
        self,
        session: AsyncSession,
        ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
    ) -> None:
        self._session = session
        self._ttl_seconds = ttl_seconds

    @staticmethod
    def _hash_token(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    async def create(self, user_id: str) -> tuple[str, datetime]:
        """Create a token for user, invalidating earlier unused ones; return (raw_token, expires_at)."""
        now = utc_now()
        await self._session.execute(
            update(PasswordResetToken)
            .where(PasswordResetToken.user_id == user_id)
            .where(PasswordResetToken.used_at.is_(None))
            .values(used_at=now)
        )
        raw = secrets.token_urlsafe(32)
        expires_at = now + timedelta(seconds=self._ttl_seconds)
        self._session.add(
            PasswordResetToken(
                token_hash=self._hash_token(raw),
                user_id=user_id,
                expires_at=expires_at,
                used_at=None,
            )
        )
        await self._session.flush()
        return (raw, expires_at)

    async def redeem(self, user_id: str, token: str) -> bool:
        """If token belongs to user and is not expired/used, mark it used and return True."""
        now = utc_now()
        result = await self._session.execute(
            select(PasswordResetToken)
            .where(PasswordResetToken.token_hash == self._hash_token(token))
            .where(PasswordResetToken.user_id == user_id)
            .where(PasswordResetToken.used_at.is_(None))
            .where(PasswordResetToken.expires_at > now)
        )
        row = result.scalar_one_or_none()
        if not row:
            return False
        row.used_at = now
        await self._session.flush()
        return True
