"""Comment API: threads, replies and emoji reactions on events."""

from fastapi import APIRouter, Request

from engage.api.v1.dependencies import CommentQueryDep, CommentServiceDep, CurrentUser
from engage.core.limiter import limit_writes
from engage.schemas.auth import MessageResponse
from engage.schemas.comment import (
    CommentCreateRequest,
    CommentResponse,
    ReactionRequest,
    ReactionResponse,
    ReplyResponse,
)

router = APIRouter()


@router.get("/{event_id}/comments", response_model=list[CommentResponse])
async def list_comments(event_id: str, user: CurrentUser, comments: CommentQueryDep):
    """Comments of an event with their replies and reaction counts."""
    return [CommentResponse.model_validate(c) for c in await comments.list_comments(event_id)]


@router.post("/{event_id}/comments", response_model=CommentResponse, status_code=201)
@limit_writes
async def add_comment(
    request: Request,
    event_id: str,
    body: CommentCreateRequest,
    user: CurrentUser,
    comments: CommentServiceDep,
):
    result = await comments.add_comment(event_id, user.id, body.content)
    return CommentResponse.model_validate(result)


@router.post("/comments/{comment_id}/replies", response_model=ReplyResponse, status_code=201)
@limit_writes
async def add_reply(
    request: Request,
    comment_id: str,
    body: CommentCreateRequest,
    user: CurrentUser,
    comments: CommentServiceDep,
):
    return ReplyResponse.model_validate(await comments.add_reply(comment_id, user.id, body.content))


@router.post("/comments/{comment_id}/reactions", response_model=ReactionResponse)
@limit_writes
async def react_to_comment(
    request: Request,
    comment_id: str,
    body: ReactionRequest,
    user: CurrentUser,
    comments: CommentServiceDep,
):
    """Set the current user's emoji on a comment (replaces a previous one)."""
    result = await comments.react_to_comment(comment_id, user.id, body.emoji)
    return ReactionResponse.model_validate(result)


@router.post("/replies/{reply_id}/reactions", response_model=ReactionResponse)
@limit_writes
async def react_to_reply(
    request: Request,
    reply_id: str,
    body: ReactionRequest,
    user: CurrentUser,
    comments: CommentServiceDep,
):
    result = await comments.react_to_reply(reply_id, user.id, body.emoji)
    return ReactionResponse.model_validate(result)


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
@limit_writes
async def delete_comment(
    request: Request, comment_id: str, user: CurrentUser, comments: CommentServiceDep
):
    """Author only. Replies and reactions go with the comment."""
    await comments.delete_comment(comment_id, user.id)
    return MessageResponse(message="Comment deleted")


@router.delete("/replies/{reply_id}", response_model=MessageResponse)
@limit_writes
async def delete_reply(request: Request, reply_id: str, user: CurrentUser, comments: CommentServiceDep):
    await comments.delete_reply(reply_id, user.id)
    return MessageResponse(message="Reply deleted")
