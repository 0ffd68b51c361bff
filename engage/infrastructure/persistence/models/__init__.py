"""Persistence models: ORM entities and mixins."""

from engage.infrastructure.persistence.models.comment import (
    CommentReaction,
    CommentReply,
    EventComment,
    ReplyReaction,
)
from engage.infrastructure.persistence.models.event import Event
from engage.infrastructure.persistence.models.interest import EventInterest
from engage.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)
from engage.infrastructure.persistence.models.participation import EventParticipation
from engage.infrastructure.persistence.models.password_reset_token import (
    PasswordResetToken,
)
from engage.infrastructure.persistence.models.role import Role, UserRole
from engage.infrastructure.persistence.models.user import User

__all__ = [
    "CommentReaction",
    "CommentReply",
    "CreatedAtMixin",
    "CuidMixin",
    "Event",
    "EventComment",
    "EventInterest",
    "EventParticipation",
    "PasswordResetToken",
    "ReplyReaction",
    "Role",
    "TimestampMixin",
    "User",
    "UserRole",
]
