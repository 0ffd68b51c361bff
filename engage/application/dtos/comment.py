"""DTOs for comments, replies and reactions."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ReactionCount:
    emoji: str
    count: int


@dataclass(frozen=True)
class ReplyResult:
    id: str
    comment_id: str
    author_id: str | None
    author_name: str | None
    content: str
    created_at: datetime
    reactions: list[ReactionCount] = field(default_factory=list)


@dataclass(frozen=True)
class CommentResult:
    id: str
    event_id: str
    author_id: str | None
    author_name: str | None
    content: str
    created_at: datetime
    reactions: list[ReactionCount] = field(default_factory=list)
    replies: list[ReplyResult] = field(default_factory=list)


@dataclass(frozen=True)
class ReactionResult:
    id: str
    target_id: str
    user_id: str
    emoji: str
