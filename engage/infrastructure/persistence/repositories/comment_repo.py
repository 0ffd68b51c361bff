"""Comment repository: comments, replies, reactions and their ordered deletion."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from engage.application.dtos.comment import CommentResult, ReactionCount, ReplyResult
from engage.infrastructure.persistence.models.comment import (
    CommentReaction,
    CommentReply,
    EventComment,
    ReplyReaction,
)
from engage.infrastructure.persistence.models.user import User
from engage.infrastructure.persistence.repositories.base import BaseRepository


def _bulk_delete(model: Any, *criteria: Any) -> Any:
    return delete(model).where(*criteria).execution_options(synchronize_session=False)


class CommentRepository(BaseRepository[EventComment]):
    """Comments with replies and reactions. Reactions are one per user per target."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, EventComment)

    async def get_reply(self, reply_id: str) -> CommentReply | None:
        return await self.db.get(CommentReply, reply_id)

    async def add_reply(self, comment_id: str, author_id: str, content: str) -> CommentReply:
        reply = CommentReply(comment_id=comment_id, author_id=author_id, content=content)
        self.db.add(reply)
        await self.db.flush()
        await self.db.refresh(reply)
        return reply

    # ---- reactions ----

    async def upsert_comment_reaction(
        self, comment_id: str, user_id: str, emoji: str
    ) -> CommentReaction:
        return await self._upsert_reaction(
            CommentReaction, CommentReaction.comment_id, comment_id, user_id, emoji
        )

    async def upsert_reply_reaction(
        self, reply_id: str, user_id: str, emoji: str
    ) -> ReplyReaction:
        return await self._upsert_reaction(
            ReplyReaction, ReplyReaction.reply_id, reply_id, user_id, emoji
        )

    async def _upsert_reaction(
        self, model: Any, parent_col: Any, parent_id: str, user_id: str, emoji: str
    ) -> Any:
        stmt = select(model).where(parent_col == parent_id, model.user_id == user_id)
        existing = (await self.db.execute(stmt)).scalar_one_or_none()
        if existing is None:
            row = model(user_id=user_id, emoji=emoji, **{parent_col.key: parent_id})
            try:
                async with self.db.begin_nested():
                    self.db.add(row)
                    await self.db.flush()
                return row
            except IntegrityError:
                existing = (await self.db.execute(stmt)).scalar_one()
        existing.emoji = emoji
        await self.db.flush()
        return existing

    # ---- reads ----

    async def list_for_event(self, event_id: str) -> list[CommentResult]:
        """Comments (oldest first) with their replies and reaction counts."""
        comments = (
            await self.db.execute(
                select(EventComment, User.full_name)
                .outerjoin(User, EventComment.author_id == User.id)
                .where(EventComment.event_id == event_id)
                .order_by(EventComment.created_at.asc())
            )
        ).all()
        if not comments:
            return []
        comment_ids = [c.id for c, _ in comments]

        replies = (
            await self.db.execute(
                select(CommentReply, User.full_name)
                .outerjoin(User, CommentReply.author_id == User.id)
                .where(CommentReply.comment_id.in_(comment_ids))
                .order_by(CommentReply.created_at.asc())
            )
        ).all()
        reply_ids = [r.id for r, _ in replies]

        comment_reactions = await self._reaction_counts(
            CommentReaction, CommentReaction.comment_id, comment_ids
        )
        reply_reactions = await self._reaction_counts(
            ReplyReaction, ReplyReaction.reply_id, reply_ids
        )

        replies_by_comment: dict[str, list[ReplyResult]] = defaultdict(list)
        for r, author_name in replies:
            replies_by_comment[r.comment_id].append(
                ReplyResult(
                    id=r.id,
                    comment_id=r.comment_id,
                    author_id=r.author_id,
                    author_name=author_name,
                    content=r.content,
                    created_at=r.created_at,
                    reactions=reply_reactions.get(r.id, []),
                )
            )
        return [
            CommentResult(
                id=c.id,
                event_id=c.event_id,
                author_id=c.author_id,
                author_name=author_name,
                content=c.content,
                created_at=c.created_at,
                reactions=comment_reactions.get(c.id, []),
                replies=replies_by_comment.get(c.id, []),
            )
            for c, author_name in comments
        ]

    async def _reaction_counts(
        self, model: Any, parent_col: Any, parent_ids: list[str]
    ) -> dict[str, list[ReactionCount]]:
        counts: dict[str, list[ReactionCount]] = defaultdict(list)
        if not parent_ids:
            return counts
        result = await self.db.execute(
            select(parent_col, model.emoji, func.count())
            .where(parent_col.in_(parent_ids))
            .group_by(parent_col, model.emoji)
            .order_by(parent_col, model.emoji)
        )
        for parent_id, emoji, count in result.all():
            counts[parent_id].append(ReactionCount(emoji=emoji, count=count))
        return counts

    # ---- deletion (children first; FKs restrict) ----

    async def delete_comment_tree(self, comment_id: str) -> None:
        """Delete reply reactions, replies, comment reactions, then the comment."""
        reply_ids = select(CommentReply.id).where(CommentReply.comment_id == comment_id)
        await self.db.execute(_bulk_delete(ReplyReaction, ReplyReaction.reply_id.in_(reply_ids)))
        await self.db.execute(_bulk_delete(CommentReply, CommentReply.comment_id == comment_id))
        await self.db.execute(
            _bulk_delete(CommentReaction, CommentReaction.comment_id == comment_id)
        )
        await self.db.execute(_bulk_delete(EventComment, EventComment.id == comment_id))

    async def delete_reply_tree(self, reply_id: str) -> None:
        await self.db.execute(_bulk_delete(ReplyReaction, ReplyReaction.reply_id == reply_id))
        await self.db.execute(_bulk_delete(CommentReply, CommentReply.id == reply_id))

    def _event_comment_ids(self, event_id: str) -> Any:
        return select(EventComment.id).where(EventComment.event_id == event_id)

    async def delete_reply_reactions_for_event(self, event_id: str) -> None:
        reply_ids = select(CommentReply.id).where(
            CommentReply.comment_id.in_(self._event_comment_ids(event_id))
        )
        await self.db.execute(_bulk_delete(ReplyReaction, ReplyReaction.reply_id.in_(reply_ids)))

    async def delete_replies_for_event(self, event_id: str) -> None:
        await self.db.execute(
            _bulk_delete(
                CommentReply, CommentReply.comment_id.in_(self._event_comment_ids(event_id))
            )
        )

    async def delete_comment_reactions_for_event(self, event_id: str) -> None:
        await self.db.execute(
            _bulk_delete(
                CommentReaction,
                CommentReaction.comment_id.in_(self._event_comment_ids(event_id)),
            )
        )

    async def delete_comments_for_event(self, event_id: str) -> None:
        await self.db.execute(_bulk_delete(EventComment, EventComment.event_id == event_id))
