"""Session/token issuer: access tokens, refresh tokens and per-request validation."""

from __future__ import annotations

import hashlib
import secrets
from datetime import timedelta

from engage.application.dtos.auth import (
    AuthenticatedUser,
    IssuedRefreshToken,
    TokenPair,
)
from engage.core.config import get_settings
from engage.domain.entities.account import AccountState
from engage.domain.exceptions import (
    AuthenticationException,
    SessionInvalidatedException,
    TokenExpiredException,
    UnauthorizedException,
)
from engage.infrastructure.persistence.models.user import User
from engage.infrastructure.persistence.repositories.user_repo import UserRepository
from engage.infrastructure.security.claims import from_jwt_claims, to_jwt_claims
from engage.infrastructure.security.jwt import (
    TokenExpiredError,
    TokenValidationError,
    create_access_token,
    verify_token,
)
from engage.shared.utils.datetime import utc_now
from engage.shared.utils.generators import generate_session_id


def hash_refresh_token(raw: str) -> str:
    """SHA-256 hex digest of a refresh token; only the digest is persisted."""
    return hashlib.sha256(raw.encode()).hexdigest()


async def load_principal(user_repo: UserRepository, user: User) -> AuthenticatedUser:
    """Build the principal for a stored user with the role bypass applied."""
    roles = await user_repo.get_roles(user.id)
    state = AccountState.from_stored(user.is_active, user.is_first_login, roles)
    return AuthenticatedUser(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        department=user.department,
        roles=state.roles,
        is_active=state.is_active,
        is_first_login=state.is_first_login,
    )


class TokenService:
    """Issues token pairs and validates access tokens against the stored session id.

    Rotating a user's session id is the only revocation mechanism: any access
    token carrying an older session id fails validation.
    """

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo
        settings = get_settings()
        self._access_ttl = timedelta(minutes=settings.access_token_expire_minutes)
        self._refresh_ttl = timedelta(days=settings.refresh_token_expire_days)

    @staticmethod
    def new_session_id() -> str:
        return generate_session_id()

    @staticmethod
    def hash_refresh_token(raw: str) -> str:
        return hash_refresh_token(raw)

    def issue_access_token(self, principal: AuthenticatedUser, session_id: str) -> str:
        claims = to_jwt_claims(principal, session_id, token_id=secrets.token_hex(16))
        return create_access_token(claims, expires_delta=self._access_ttl)

    def issue_refresh_token(self) -> IssuedRefreshToken:
        raw = secrets.token_urlsafe(64)
        return IssuedRefreshToken(
            raw=raw,
            token_hash=hash_refresh_token(raw),
            expires_at=utc_now() + self._refresh_ttl,
        )

    def issue_token_pair(self, principal: AuthenticatedUser, session_id: str) -> TokenPair:
        """Access + refresh pair. Persist hash_refresh_token(pair.refresh_token)."""
        refresh = self.issue_refresh_token()
        return TokenPair(
            access_token=self.issue_access_token(principal, session_id),
            refresh_token=refresh.raw,
            expires_in=int(self._access_ttl.total_seconds()),
            refresh_token_expires_at=refresh.expires_at,
        )

    async def validate_access_token(self, token: str) -> AuthenticatedUser:
        """Verify the token and that its session is still the user's current one.

        Raises:
            TokenExpiredException: Token is past its expiry.
            AuthenticationException: Token invalid or user unknown.
            SessionInvalidatedException: Session id no longer matches.
            UnauthorizedException: Account deactivated (SuperAdmin exempt).
        """
        try:
            payload = verify_token(token)
            claims = from_jwt_claims(payload)
        except TokenExpiredError as e:
            raise TokenExpiredException() from e
        except (TokenValidationError, ValueError, KeyError) as e:
            raise AuthenticationException("Invalid access token") from e

        user = await self._user_repo.get_by_id(claims.user_id)
        if user is None:
            raise AuthenticationException("Invalid access token")
        if not user.session_id or user.session_id != claims.session_id:
            raise SessionInvalidatedException()

        principal = await load_principal(self._user_repo, user)
        if not principal.is_active:
            raise UnauthorizedException("Account deactivated")
        return principal
