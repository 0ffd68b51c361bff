"""Comment, reply and reaction API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class ReactionRequest(BaseModel):
    emoji: str = Field(..., min_length=1, max_length=32)


class ReactionCountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    emoji: str
    count: int


class ReplyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    comment_id: str
    author_id: str | None = None
    author_name: str | None = None
    content: str
    created_at: datetime
    reactions: list[ReactionCountResponse] = Field(default_factory=list)


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    author_id: str | None = None
    author_name: str | None = None
    content: str
    created_at: datetime
    reactions: list[ReactionCountResponse] = Field(default_factory=list)
    replies: list[ReplyResponse] = Field(default_factory=list)


class ReactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    target_id: str
    user_id: str
    emoji: str
