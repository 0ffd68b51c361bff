"""Password hashing for the credential store.

bcrypt only reads the first 72 bytes of its input, so each password is
reduced to a base64 SHA-256 digest first. Hashing and checks are CPU bound
and run in a worker thread.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib

import bcrypt

DEFAULT_ROUNDS = 12


def _digest(password: str) -> bytes:
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


class PasswordHasher:
    """bcrypt over a SHA-256 digest of the password."""

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self.rounds = rounds
        self._decoy: str | None = None

    def hash_sync(self, password: str) -> str:
        return bcrypt.hashpw(_digest(password), bcrypt.gensalt(self.rounds)).decode("ascii")

    def matches_sync(self, password: str, stored_hash: str) -> bool:
        """False for a wrong password and for a stored value that is not a bcrypt hash."""
        try:
            return bcrypt.checkpw(_digest(password), stored_hash.encode("ascii"))
        except (ValueError, TypeError, UnicodeEncodeError):
            return False

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(self.hash_sync, password)

    async def matches(self, password: str, stored_hash: str) -> bool:
        return await asyncio.to_thread(self.matches_sync, password, stored_hash)

    async def burn(self, password: str) -> None:
        """Spend one bcrypt check on a decoy hash (login for an unknown email)."""
        if self._decoy is None:
            self._decoy = await self.hash("decoy-password-never-matches")
        await self.matches(password, self._decoy)


password_hasher = PasswordHasher()
