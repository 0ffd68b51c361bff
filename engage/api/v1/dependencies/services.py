"""Application service dependencies (composition root).

Each request gets services bound to its session. Write variants share the
request's UnitOfWork so their notifications land in its outbox.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from engage.api.v1.dependencies.db import (
    ReadSession,
    UnitOfWork,
    WriteUnit,
    build_user_repo,
)
from engage.application.services.auth_service import AuthService
from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.application.services.role_service import RoleService
from engage.application.services.token_service import TokenService
from engage.application.services.user_service import UserService
from engage.application.use_cases.analytics import EventAnalyticsService
from engage.application.use_cases.events import EventCommentService, EventWorkflowEngine
from engage.infrastructure.persistence.repositories import (
    CommentRepository,
    EventRepository,
    InterestRepository,
    ParticipationRepository,
    RoleRepository,
)


def _auth_service(session: AsyncSession, outbox: NotificationOutbox | None = None) -> AuthService:
    user_repo = build_user_repo(session)
    return AuthService(user_repo, TokenService(user_repo), outbox)


def _workflow(session: AsyncSession, outbox: NotificationOutbox | None = None) -> EventWorkflowEngine:
    return EventWorkflowEngine(
        EventRepository(session),
        ParticipationRepository(session),
        InterestRepository(session),
        CommentRepository(session),
        build_user_repo(session),
        outbox,
    )


async def get_token_service(db: ReadSession) -> TokenService:
    return TokenService(build_user_repo(db))


async def get_auth_service(uow: WriteUnit) -> AuthService:
    """Auth workflow on the write transaction (login and friends mutate session state)."""
    return _auth_service(uow.session, uow.outbox)


async def get_auth_query_service(db: ReadSession) -> AuthService:
    return _auth_service(db)


async def get_event_workflow(uow: WriteUnit) -> EventWorkflowEngine:
    return _workflow(uow.session, uow.outbox)


async def get_event_queries(db: ReadSession) -> EventWorkflowEngine:
    """Engine on the read session, for listings and status queries."""
    return _workflow(db)


async def get_comment_service(uow: WriteUnit) -> EventCommentService:
    return EventCommentService(
        CommentRepository(uow.session), EventRepository(uow.session), uow.outbox
    )


async def get_comment_queries(db: ReadSession) -> EventCommentService:
    return EventCommentService(CommentRepository(db), EventRepository(db))


async def get_analytics_service(db: ReadSession) -> EventAnalyticsService:
    return EventAnalyticsService(EventRepository(db))


async def get_user_service(uow: WriteUnit) -> UserService:
    return UserService(build_user_repo(uow.session), uow.outbox)


async def get_user_queries(db: ReadSession) -> UserService:
    return UserService(build_user_repo(db))


async def get_role_service(uow: WriteUnit) -> RoleService:
    return RoleService(RoleRepository(uow.session), build_user_repo(uow.session))


async def get_role_queries(db: ReadSession) -> RoleService:
    return RoleService(RoleRepository(db), build_user_repo(db))


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
AuthQueryDep = Annotated[AuthService, Depends(get_auth_query_service)]
WorkflowDep = Annotated[EventWorkflowEngine, Depends(get_event_workflow)]
EventQueryDep = Annotated[EventWorkflowEngine, Depends(get_event_queries)]
CommentServiceDep = Annotated[EventCommentService, Depends(get_comment_service)]
CommentQueryDep = Annotated[EventCommentService, Depends(get_comment_queries)]
AnalyticsDep = Annotated[EventAnalyticsService, Depends(get_analytics_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
UserQueryDep = Annotated[UserService, Depends(get_user_queries)]
RoleServiceDep = Annotated[RoleService, Depends(get_role_service)]
RoleQueryDep = Annotated[RoleService, Depends(get_role_queries)]

__all__ = [
    "AnalyticsDep",
    "AuthQueryDep",
    "AuthServiceDep",
    "CommentQueryDep",
    "CommentServiceDep",
    "EventQueryDep",
    "RoleQueryDep",
    "RoleServiceDep",
    "UnitOfWork",
    "UserQueryDep",
    "UserServiceDep",
    "WorkflowDep",
]
