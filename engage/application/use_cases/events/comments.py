"""Comments, replies and emoji reactions on events."""

from __future__ import annotations

from engage.application.dtos.comment import CommentResult, ReactionResult, ReplyResult
from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from engage.infrastructure.external.webhooks import forwarder as hooks
from engage.infrastructure.persistence.models.comment import EventComment
from engage.infrastructure.persistence.repositories.comment_repo import CommentRepository
from engage.infrastructure.persistence.repositories.event_repo import EventRepository
from engage.shared.telemetry.logging import get_logger
from engage.shared.utils.sanitization import sanitize_text

logger = get_logger(__name__)

CONTENT_MAX_LENGTH = 2000
EMOJI_MAX_LENGTH = 32


def _clean_content(content: str) -> str:
    cleaned = sanitize_text(content or "")
    if not cleaned:
        raise ValidationException("Content is required", field="content")
    if len(cleaned) > CONTENT_MAX_LENGTH:
        raise ValidationException(
            f"Content must be at most {CONTENT_MAX_LENGTH} characters", field="content"
        )
    return cleaned


def _clean_emoji(emoji: str) -> str:
    emoji = (emoji or "").strip()
    if not emoji or len(emoji) > EMOJI_MAX_LENGTH:
        raise ValidationException("Invalid emoji", field="emoji")
    return emoji


class EventCommentService:
    """Comment threads on events. Only authors may delete their comments and replies."""

    def __init__(
        self,
        comment_repo: CommentRepository,
        event_repo: EventRepository,
        outbox: NotificationOutbox | None = None,
    ) -> None:
        self.comment_repo = comment_repo
        self.event_repo = event_repo
        self.outbox = outbox if outbox is not None else NotificationOutbox()

    async def _get_comment(self, comment_id: str) -> EventComment:
        comment = await self.comment_repo.get_by_id(comment_id)
        if comment is None:
            raise ResourceNotFoundException("comment", comment_id)
        return comment

    async def add_comment(self, event_id: str, author_id: str, content: str) -> CommentResult:
        event = await self.event_repo.get_by_id(event_id)
        if event is None:
            raise ResourceNotFoundException("event", event_id)
        comment = await self.comment_repo.create(
            EventComment(event_id=event_id, author_id=author_id, content=_clean_content(content))
        )
        self.outbox.webhook(
            hooks.COMMENT_CREATED,
            {
                "comment_id": comment.id,
                "event_id": event_id,
                "event_title": event.title,
                "author_id": author_id,
                "organizer_id": event.organizer_id,
            },
        )
        return CommentResult(
            id=comment.id,
            event_id=comment.event_id,
            author_id=comment.author_id,
            author_name=None,
            content=comment.content,
            created_at=comment.created_at,
        )

    async def list_comments(self, event_id: str) -> list[CommentResult]:
        if await self.event_repo.get_by_id(event_id) is None:
            raise ResourceNotFoundException("event", event_id)
        return await self.comment_repo.list_for_event(event_id)

    async def add_reply(self, comment_id: str, author_id: str, content: str) -> ReplyResult:
        await self._get_comment(comment_id)
        reply = await self.comment_repo.add_reply(comment_id, author_id, _clean_content(content))
        return ReplyResult(
            id=reply.id,
            comment_id=reply.comment_id,
            author_id=reply.author_id,
            author_name=None,
            content=reply.content,
            created_at=reply.created_at,
        )

    async def react_to_comment(self, comment_id: str, user_id: str, emoji: str) -> ReactionResult:
        """Set the user's reaction on a comment, replacing any earlier emoji."""
        await self._get_comment(comment_id)
        reaction = await self.comment_repo.upsert_comment_reaction(
            comment_id, user_id, _clean_emoji(emoji)
        )
        return ReactionResult(
            id=reaction.id, target_id=comment_id, user_id=user_id, emoji=reaction.emoji
        )

    async def react_to_reply(self, reply_id: str, user_id: str, emoji: str) -> ReactionResult:
        if await self.comment_repo.get_reply(reply_id) is None:
            raise ResourceNotFoundException("reply", reply_id)
        reaction = await self.comment_repo.upsert_reply_reaction(
            reply_id, user_id, _clean_emoji(emoji)
        )
        return ReactionResult(
            id=reaction.id, target_id=reply_id, user_id=user_id, emoji=reaction.emoji
        )

    async def delete_comment(self, comment_id: str, user_id: str) -> None:
        comment = await self._get_comment(comment_id)
        if comment.author_id != user_id:
            raise AuthorizationException("comment", "delete")
        await self.comment_repo.delete_comment_tree(comment_id)
        logger.info("Comment deleted: comment_id=%s", comment_id)

    async def delete_reply(self, reply_id: str, user_id: str) -> None:
        reply = await self.comment_repo.get_reply(reply_id)
        if reply is None:
            raise ResourceNotFoundException("reply", reply_id)
        if reply.author_id != user_id:
            raise AuthorizationException("reply", "delete")
        await self.comment_repo.delete_reply_tree(reply_id)
