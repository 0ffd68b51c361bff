"""Repositories (SQLAlchemy, async). Writes flush; the request transaction commits."""

from engage.infrastructure.persistence.repositories.base import BaseRepository
from engage.infrastructure.persistence.repositories.comment_repo import CommentRepository
from engage.infrastructure.persistence.repositories.event_repo import EventRepository
from engage.infrastructure.persistence.repositories.participation_repo import (
    InterestRepository,
    ParticipationRepository,
)
from engage.infrastructure.persistence.repositories.password_reset_token_repo import (
    PasswordResetTokenStore,
)
from engage.infrastructure.persistence.repositories.role_repo import RoleRepository
from engage.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "EventRepository",
    "InterestRepository",
    "ParticipationRepository",
    "PasswordResetTokenStore",
    "RoleRepository",
    "UserRepository",
]
