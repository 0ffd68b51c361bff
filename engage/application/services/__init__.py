"""Application services: auth workflow, token issuer, users and roles, notifications."""

from engage.application.services.auth_service import AuthService
from engage.application.services.notification_dispatcher import (
    NotificationDispatcher,
    NotificationOutbox,
)
from engage.application.services.role_service import RoleService
from engage.application.services.token_service import TokenService
from engage.application.services.user_service import UserService

__all__ = [
    "AuthService",
    "NotificationDispatcher",
    "NotificationOutbox",
    "RoleService",
    "TokenService",
    "UserService",
]
