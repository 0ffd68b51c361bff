"""Auth workflow: registration, login, forced password change, refresh, logout, reset.

Every successful login, password change and refresh rotates the user's
session id. Accounts that are inactive or still on their first login get
identity and flags back from login but no tokens until they change their
password. SuperAdmin is exempt from both flags.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from engage.application.dtos.auth import AuthenticatedUser, LoginResult, TokenPair
from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.application.services.token_service import (
    TokenService,
    hash_refresh_token,
    load_principal,
)
from engage.core.config import get_settings
from engage.domain.enums import RoleName
from engage.domain.exceptions import (
    InvalidCredentialsException,
    SecurityTokenException,
    UnauthorizedException,
    ValidationException,
)
from engage.infrastructure.external.email import templates
from engage.infrastructure.external.webhooks import forwarder as hooks
from engage.infrastructure.persistence.models.user import User
from engage.infrastructure.persistence.repositories.user_repo import UserRepository
from engage.shared.telemetry.logging import get_logger
from engage.shared.utils.datetime import ensure_utc, utc_now

logger = get_logger(__name__)


class AuthService:
    """Authentication and session lifecycle over the credential store and token issuer."""

    def __init__(
        self,
        user_repo: UserRepository,
        token_service: TokenService,
        outbox: NotificationOutbox | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._tokens = token_service
        self._outbox = outbox if outbox is not None else NotificationOutbox()
        self._settings = get_settings()

    async def _start_session(self, user: User, principal: AuthenticatedUser) -> TokenPair:
        """Rotate the session id and persist a fresh refresh token; return the pair."""
        session_id = self._tokens.new_session_id()
        pair = self._tokens.issue_token_pair(principal, session_id)
        await self._user_repo.set_session(
            user,
            session_id,
            refresh_token_hash=hash_refresh_token(pair.refresh_token),
            refresh_token_expires_at=pair.refresh_token_expires_at,
        )
        return pair

    async def register(
        self,
        full_name: str,
        email: str,
        password: str,
        department: str | None = None,
    ) -> AuthenticatedUser:
        """Self-registration. The account starts inactive and on first login."""
        result = await self._user_repo.create_user(
            email=email,
            full_name=full_name,
            password=password,
            department=department,
            roles=[RoleName.EMPLOYEE_EY.value],
            is_active=False,
            is_first_login=True,
        )
        if not result.succeeded or result.user_id is None:
            raise ValidationException("Registration failed", errors=result.errors)
        user = await self._user_repo.get_by_id(result.user_id)
        if user is None:
            raise ValidationException("Registration failed")
        principal = await load_principal(self._user_repo, user)
        self._outbox.webhook(
            hooks.USER_CREATED,
            {
                "user_id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "department": user.department,
                "roles": sorted(principal.roles),
            },
        )
        logger.info("User registered: user_id=%s", user.id)
        return principal

    async def login(self, email: str, password: str) -> LoginResult:
        """Check credentials and open a new session.

        Raises:
            InvalidCredentialsException: Unknown email or wrong password.
        """
        user = await self._user_repo.authenticate(email, password)
        if user is None:
            raise InvalidCredentialsException()
        principal = await load_principal(self._user_repo, user)
        if principal.needs_password_change:
            # Session rotates anyway so earlier tokens stop working.
            await self._user_repo.set_session(user, self._tokens.new_session_id())
            logger.info("Login requires password change: user_id=%s", user.id)
            return LoginResult(user=principal, tokens=None)
        pair = await self._start_session(user, principal)
        logger.info("Login succeeded: user_id=%s", user.id)
        return LoginResult(user=principal, tokens=pair)

    async def change_password(
        self,
        email: str,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> LoginResult:
        """Set a new password, activate the account and issue a fresh token pair."""
        if new_password != confirm_password:
            raise ValidationException(
                "New password and confirmation do not match", field="confirm_password"
            )
        user = await self._user_repo.get_by_email(email)
        if user is None:
            raise ValidationException("Password change failed", errors=["Incorrect password."])
        result = await self._user_repo.change_password(user, current_password, new_password)
        if not result.succeeded:
            raise ValidationException("Password change failed", errors=result.errors)

        was_inactive = not user.is_active
        user.is_active = True
        user.is_first_login = False
        principal = await load_principal(self._user_repo, user)
        pair = await self._start_session(user, principal)
        if was_inactive:
            self._outbox.webhook(
                hooks.USER_ACTIVATED,
                {"user_id": user.id, "email": user.email, "full_name": user.full_name},
            )
        logger.info("Password changed: user_id=%s", user.id)
        return LoginResult(user=principal, tokens=pair)

    async def refresh(self, refresh_token: str | None) -> LoginResult:
        """Exchange a refresh token for a new pair. Stored state is untouched on failure.

        Raises:
            SecurityTokenException: Token missing, unknown or expired.
            UnauthorizedException: Account still needs a password change.
        """
        if not refresh_token:
            raise SecurityTokenException("Refresh token is required")
        user = await self._user_repo.get_by_refresh_token_hash(
            hash_refresh_token(refresh_token)
        )
        if user is None:
            raise SecurityTokenException()
        expires_at = ensure_utc(user.refresh_token_expires_at)
        if expires_at is None or expires_at <= utc_now():
            raise SecurityTokenException()
        principal = await load_principal(self._user_repo, user)
        if principal.needs_password_change:
            raise UnauthorizedException("Password change required")
        pair = await self._start_session(user, principal)
        return LoginResult(user=principal, tokens=pair)

    async def logout(self, user_id: str) -> None:
        """Clear session id and refresh token. Failures are logged, not raised."""
        try:
            user = await self._user_repo.get_by_id(user_id)
            if user is None:
                return
            await self._user_repo.clear_session(user)
        except SQLAlchemyError:
            logger.exception("Logout failed to clear session: user_id=%s", user_id)
            return
        logger.info("Logged out: user_id=%s", user_id)

    async def forgot_password(self, email: str) -> None:
        """Email a reset link when the account exists. Same outcome either way."""
        user = await self._user_repo.get_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return
        token, _expires_at = await self._user_repo.generate_reset_token(user)
        link = templates.reset_password_link(self._settings.frontend_url, user.email, token)
        subject, body = templates.password_reset(
            user.full_name,
            link,
            ttl_minutes=self._settings.password_reset_token_ttl_seconds // 60,
        )
        self._outbox.email(user.email, subject, body)

    async def reset_password(self, email: str, token: str, new_password: str) -> None:
        """Redeem a reset token and end every session of the account."""
        user = await self._user_repo.get_by_email(email)
        if user is None:
            raise ValidationException("Password reset failed", errors=["Invalid token."])
        result = await self._user_repo.reset_password(user, token, new_password)
        if not result.succeeded:
            raise ValidationException("Password reset failed", errors=result.errors)
        await self._user_repo.set_session(user, None)
        logger.info("Password reset: user_id=%s", user.id)

    async def check_email(self, email: str) -> bool:
        return await self._user_repo.get_by_email(email) is not None

    async def current_user(self, principal: AuthenticatedUser) -> AuthenticatedUser:
        return principal
