"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from engage.domain.entities import AccountState
from engage.domain.enums import (
    ADMIN_ROLES,
    APPROVER_ROLES,
    Department,
    EventStatus,
    ParticipationStatus,
    RoleName,
)
from engage.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DeliveryError,
    EngageException,
    InvalidCredentialsException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    SecurityTokenException,
    SessionInvalidatedException,
    TokenExpiredException,
    UnauthorizedException,
    ValidationException,
)

__all__ = [
    "ADMIN_ROLES",
    "APPROVER_ROLES",
    "AccountState",
    "AuthenticationException",
    "AuthorizationException",
    "DeliveryError",
    "Department",
    "EngageException",
    "EventStatus",
    "InvalidCredentialsException",
    "InvalidStatusTransitionException",
    "ParticipationStatus",
    "ResourceNotFoundException",
    "RoleName",
    "SecurityTokenException",
    "SessionInvalidatedException",
    "TokenExpiredException",
    "UnauthorizedException",
    "ValidationException",
]
