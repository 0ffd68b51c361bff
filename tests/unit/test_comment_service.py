"""EventCommentService with mocked repositories."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.application.use_cases.events import EventCommentService
from engage.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from engage.infrastructure.external.webhooks import forwarder as hooks
from engage.infrastructure.persistence.models.comment import CommentReply, EventComment
from engage.infrastructure.persistence.models.event import Event

CREATED = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


async def _stamp(comment: EventComment) -> EventComment:
    comment.id = "c1"
    comment.created_at = CREATED
    return comment


@pytest.fixture
def repos():
    comment_repo = AsyncMock()
    comment_repo.create.side_effect = _stamp
    event_repo = AsyncMock()
    event_repo.get_by_id.return_value = Event(
        id="ev1", title="Afterwork", organizer_id="org-1", status="Approved"
    )
    return comment_repo, event_repo


@pytest.fixture
def outbox():
    return NotificationOutbox()


@pytest.fixture
def service(repos, outbox):
    comment_repo, event_repo = repos
    return EventCommentService(comment_repo, event_repo, outbox)


async def test_add_comment_sanitizes_and_notifies(service, outbox) -> None:
    result = await service.add_comment("ev1", "user-1", "  <b>Super</b> idée<script>x</script> ")

    assert result.content == "Super idée"
    assert result.id == "c1"
    [hook] = outbox.webhooks
    assert hook.endpoint == hooks.COMMENT_CREATED
    assert hook.payload["organizer_id"] == "org-1"
    assert hook.payload["event_title"] == "Afterwork"


async def test_add_comment_unknown_event(service, repos, outbox) -> None:
    repos[1].get_by_id.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.add_comment("missing", "user-1", "hello")
    repos[0].create.assert_not_awaited()
    assert not outbox


async def test_markup_only_content_rejected(service, repos) -> None:
    with pytest.raises(ValidationException):
        await service.add_comment("ev1", "user-1", "<img src=x>")
    repos[0].create.assert_not_awaited()


async def test_delete_comment_by_other_user_forbidden(service, repos) -> None:
    comment_repo = repos[0]
    comment_repo.get_by_id.return_value = EventComment(
        id="c1", event_id="ev1", author_id="author", content="x"
    )
    with pytest.raises(AuthorizationException):
        await service.delete_comment("c1", "someone-else")
    comment_repo.delete_comment_tree.assert_not_awaited()

    await service.delete_comment("c1", "author")
    comment_repo.delete_comment_tree.assert_awaited_once_with("c1")


async def test_delete_reply_checks_author(service, repos) -> None:
    comment_repo = repos[0]
    comment_repo.get_reply.return_value = CommentReply(
        id="r1", comment_id="c1", author_id="author", content="x"
    )
    with pytest.raises(AuthorizationException):
        await service.delete_reply("r1", "someone-else")
    comment_repo.get_reply.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await service.delete_reply("r1", "author")


@pytest.mark.parametrize("emoji", ["", "   ", "x" * 33])
async def test_invalid_emoji_rejected(service, repos, emoji) -> None:
    repos[0].get_by_id.return_value = EventComment(
        id="c1", event_id="ev1", author_id="author", content="x"
    )
    with pytest.raises(ValidationException):
        await service.react_to_comment("c1", "user-1", emoji)
    repos[0].upsert_comment_reaction.assert_not_awaited()
