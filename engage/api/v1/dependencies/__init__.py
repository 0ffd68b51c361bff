"""Presentation-layer dependency injection (composition root).

Routes depend only on these dependencies, never on infrastructure directly.
"""

from engage.api.v1.dependencies.auth import (
    Admin,
    Approver,
    CurrentUser,
    get_authenticated_user,
    get_current_user,
    get_optional_user,
    require_roles,
)
from engage.api.v1.dependencies.db import UnitOfWork, get_uow, schedule_dispatch
from engage.api.v1.dependencies.services import (
    AnalyticsDep,
    AuthQueryDep,
    AuthServiceDep,
    CommentQueryDep,
    CommentServiceDep,
    EventQueryDep,
    RoleQueryDep,
    RoleServiceDep,
    UserQueryDep,
    UserServiceDep,
    WorkflowDep,
)

__all__ = [
    "Admin",
    "AnalyticsDep",
    "Approver",
    "AuthQueryDep",
    "AuthServiceDep",
    "CommentQueryDep",
    "CommentServiceDep",
    "CurrentUser",
    "EventQueryDep",
    "RoleQueryDep",
    "RoleServiceDep",
    "UnitOfWork",
    "UserQueryDep",
    "UserServiceDep",
    "WorkflowDep",
    "get_authenticated_user",
    "get_current_user",
    "get_optional_user",
    "get_uow",
    "require_roles",
    "schedule_dispatch",
]
