"""User administration: admin-created accounts, listing, activation."""

from __future__ import annotations

from engage.application.dtos.user import CreateUserCommand, UserResult
from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.core.config import get_settings
from engage.domain.enums import RoleName
from engage.domain.exceptions import ResourceNotFoundException, ValidationException
from engage.infrastructure.external.email import templates
from engage.infrastructure.external.webhooks import forwarder as hooks
from engage.infrastructure.persistence.models.user import User
from engage.infrastructure.persistence.repositories.user_repo import UserRepository
from engage.shared.telemetry.logging import get_logger
from engage.shared.utils.generators import generate_temporary_password

logger = get_logger(__name__)


def _user_to_result(u: User, roles: list[str]) -> UserResult:
    """Build UserResult from the ORM user and its role names."""
    return UserResult(
        id=u.id,
        email=u.email,
        full_name=u.full_name,
        department=u.department,
        fonction=u.fonction,
        sector=u.sector,
        phone_number=u.phone_number,
        is_active=u.is_active,
        is_first_login=u.is_first_login,
        roles=roles,
        created_at=u.created_at,
    )


class UserService:
    """Admin-side user management. Role checks happen in the HTTP dependencies."""

    def __init__(
        self,
        user_repo: UserRepository,
        outbox: NotificationOutbox | None = None,
    ) -> None:
        self._user_repo = user_repo
        self._outbox = outbox if outbox is not None else NotificationOutbox()

    async def create_user(self, data: CreateUserCommand) -> UserResult:
        """Create an inactive first-login account and email a temporary password."""
        roles = list(data.roles) or [RoleName.EMPLOYEE_EY.value]
        temporary_password = generate_temporary_password()
        result = await self._user_repo.create_user(
            email=data.email,
            full_name=data.full_name,
            password=temporary_password,
            department=data.department,
            fonction=data.fonction,
            sector=data.sector,
            phone_number=data.phone_number,
            roles=roles,
            is_active=False,
            is_first_login=True,
        )
        if not result.succeeded or result.user_id is None:
            raise ValidationException("User creation failed", errors=result.errors)
        user = await self._get(result.user_id)

        login_url = get_settings().frontend_url.rstrip("/") + "/login"
        subject, body = templates.account_credentials(
            user.full_name, user.email, temporary_password, login_url
        )
        self._outbox.email(user.email, subject, body)
        self._outbox.webhook(
            hooks.USER_CREATED,
            {
                "user_id": user.id,
                "email": user.email,
                "full_name": user.full_name,
                "department": user.department,
                "roles": sorted(roles),
            },
        )
        logger.info("User created by admin: user_id=%s", user.id)
        return _user_to_result(user, sorted(roles))

    async def _get(self, user_id: str) -> User:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def get_user(self, user_id: str) -> UserResult:
        user = await self._get(user_id)
        return _user_to_result(user, await self._user_repo.get_roles(user.id))

    async def list_users(self, skip: int = 0, limit: int = 100) -> list[UserResult]:
        users = await self._user_repo.list_users(skip=skip, limit=limit)
        roles = await self._user_repo.get_roles_for_users(u.id for u in users)
        return [_user_to_result(u, roles.get(u.id, [])) for u in users]

    async def deactivate_user(self, user_id: str) -> UserResult:
        """Deactivate and end the user's session."""
        user = await self._get(user_id)
        user.is_active = False
        await self._user_repo.set_session(user, None)
        logger.info("User deactivated: user_id=%s", user_id)
        return _user_to_result(user, await self._user_repo.get_roles(user.id))

    async def activate_user(self, user_id: str) -> UserResult:
        user = await self._get(user_id)
        user.is_active = True
        await self._user_repo.update(user)
        return _user_to_result(user, await self._user_repo.get_roles(user.id))
