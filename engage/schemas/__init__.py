"""Pydantic request/response schemas for the API."""

from engage.schemas.auth import LoginRequest, LoginResponse, TokenResponse
from engage.schemas.comment import CommentResponse
from engage.schemas.event import EventCreateRequest, EventResponse, ParticipationResponse
from engage.schemas.health import HealthResponse
from engage.schemas.role import RoleResponse
from engage.schemas.user import UserCreateRequest, UserResponse

__all__ = [
    "CommentResponse",
    "EventCreateRequest",
    "EventResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "ParticipationResponse",
    "RoleResponse",
    "TokenResponse",
    "UserCreateRequest",
    "UserResponse",
]
