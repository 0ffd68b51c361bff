"""EventWorkflowEngine unit tests with mocked repositories."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from engage.application.dtos.event import CreateEventCommand, EventResult
from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.application.use_cases.events import EventWorkflowEngine
from engage.domain.enums import EventStatus, ParticipationStatus
from engage.domain.exceptions import (
    AuthorizationException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from engage.infrastructure.external.webhooks import forwarder as hooks
from engage.infrastructure.persistence.models.event import Event
from engage.infrastructure.persistence.models.participation import EventParticipation
from engage.infrastructure.persistence.models.user import User
from tests.fakes import make_principal

EVENT_DATE = datetime(2026, 11, 20, 18, 30, tzinfo=timezone.utc)


def _event(status: str = EventStatus.PENDING.value, organizer_id: str = "org-1") -> Event:
    return Event(
        id="ev1",
        title="Soirée d'intégration",
        description="",
        date=EVENT_DATE,
        location="Tour First",
        status=status,
        organizer_id=organizer_id,
        approved_by_id=None,
    )


def _event_result(event: Event) -> EventResult:
    return EventResult(
        id=event.id,
        title=event.title,
        description=event.description,
        date=event.date,
        location=event.location,
        image_path=None,
        status=event.status,
        organizer_id=event.organizer_id,
        approved_by_id=event.approved_by_id,
        created_at=EVENT_DATE,
    )


def _participation(status: str = ParticipationStatus.PENDING.value) -> EventParticipation:
    return EventParticipation(
        id="p1",
        event_id="ev1",
        user_id="user-7",
        status=status,
        requested_at=EVENT_DATE,
        decided_at=None,
        approved_by_id=None,
    )


class _Interests:
    """In-memory interest store."""

    def __init__(self) -> None:
        self.pairs: set[tuple[str, str]] = set()

    async def exists(self, event_id: str, user_id: str) -> bool:
        return (event_id, user_id) in self.pairs

    async def add(self, event_id: str, user_id: str) -> bool:
        self.pairs.add((event_id, user_id))
        return True

    async def remove(self, event_id: str, user_id: str) -> None:
        self.pairs.discard((event_id, user_id))


@pytest.fixture
def event():
    return _event()


@pytest.fixture
def mocks(event):
    """Engine with mocked repositories; event_repo serves the given event row."""
    event_repo = AsyncMock()
    event_repo.get_by_id = AsyncMock(side_effect=lambda eid: event if eid == event.id else None)
    event_repo.get_result = AsyncMock(side_effect=lambda eid: _event_result(event))
    event_repo.create = AsyncMock(side_effect=lambda row: row)
    participation_repo = AsyncMock()
    interest_repo = AsyncMock()
    comment_repo = AsyncMock()
    user_repo = AsyncMock()
    user_repo.get_by_id = AsyncMock(
        return_value=User(id="user-7", email="participant@ey.com", full_name="Paul Martin")
    )
    outbox = NotificationOutbox()
    engine = EventWorkflowEngine(
        event_repo, participation_repo, interest_repo, comment_repo, user_repo, outbox
    )
    return engine, event_repo, participation_repo, interest_repo, comment_repo, outbox


async def test_create_event_is_pending_and_sanitized(mocks) -> None:
    engine, event_repo, *_, outbox = mocks
    await engine.create_event(
        "org-1",
        CreateEventCommand(
            title="<b>Afterwork</b>",
            description="<script>x</script>Drinks",
            date=EVENT_DATE,
            location="Tour First",
        ),
    )
    created: Event = event_repo.create.await_args.args[0]
    assert created.status == EventStatus.PENDING.value
    assert created.title == "Afterwork"
    assert "<script>" not in created.description
    assert created.organizer_id == "org-1"
    assert [w.endpoint for w in outbox.webhooks] == [hooks.EVENT_CREATED]


async def test_create_event_requires_aware_date(mocks) -> None:
    engine, event_repo, *_ = mocks
    with pytest.raises(ValidationException):
        await engine.create_event(
            "org-1",
            CreateEventCommand(
                title="Afterwork", description="", date=datetime(2026, 1, 1), location="Paris"
            ),
        )
    event_repo.create.assert_not_awaited()


async def test_approve_event_records_approver(mocks, event) -> None:
    engine, event_repo, *_, outbox = mocks
    await engine.approve_event("ev1", "agent-1")
    assert event.status == EventStatus.APPROVED.value
    assert event.approved_by_id == "agent-1"
    event_repo.update.assert_awaited_once_with(event)
    assert outbox.webhooks[0].endpoint == hooks.EVENT_APPROVED
    assert outbox.webhooks[0].payload["approver_id"] == "agent-1"


async def test_reject_event_also_records_approver(mocks, event) -> None:
    engine, *_, outbox = mocks
    await engine.reject_event("ev1", "agent-2")
    assert event.status == EventStatus.REJECTED.value
    assert event.approved_by_id == "agent-2"
    assert outbox.webhooks[0].endpoint == hooks.EVENT_REJECTED


@pytest.mark.parametrize("status", [EventStatus.APPROVED.value, EventStatus.REJECTED.value])
async def test_decided_event_cannot_move(mocks, event, status: str) -> None:
    engine, event_repo, *_, outbox = mocks
    event.status = status
    with pytest.raises(InvalidStatusTransitionException):
        await engine.approve_event("ev1", "agent-1")
    assert event.approved_by_id is None
    event_repo.update.assert_not_awaited()
    assert len(outbox) == 0


async def test_unknown_event(mocks) -> None:
    engine, *_ = mocks
    with pytest.raises(ResourceNotFoundException):
        await engine.approve_event("missing", "agent-1")


async def test_request_participation_upserts_pending(mocks) -> None:
    engine, _, participation_repo, *_, outbox = mocks
    participation_repo.upsert_pending = AsyncMock(return_value=_participation())
    result = await engine.request_participation("ev1", "user-7")
    participation_repo.upsert_pending.assert_awaited_once_with("ev1", "user-7")
    assert result.status == ParticipationStatus.PENDING.value
    assert outbox.webhooks[0].endpoint == hooks.PARTICIPATION_REQUESTED


async def test_request_participation_on_unknown_event(mocks) -> None:
    engine, _, participation_repo, *_ = mocks
    with pytest.raises(ResourceNotFoundException):
        await engine.request_participation("missing", "user-7")
    participation_repo.upsert_pending.assert_not_awaited()


async def test_approve_participation_emails_participant_once(mocks) -> None:
    engine, _, participation_repo, *_, outbox = mocks
    participation = _participation()
    participation_repo.get_by_id = AsyncMock(return_value=participation)

    result = await engine.approve_participation("p1", "agent-1")

    assert result.status == ParticipationStatus.APPROVED.value
    assert participation.decided_at is not None
    assert participation.approved_by_id == "agent-1"
    assert len(outbox.emails) == 1
    assert outbox.emails[0].to == "participant@ey.com"
    assert outbox.emails[0].subject == "Participation confirmée : Soirée d'intégration"
    assert [w.endpoint for w in outbox.webhooks] == [hooks.PARTICIPATION_APPROVED]


async def test_approve_participation_twice_restamps(mocks) -> None:
    """Last writer wins: a second approval overwrites approver and decision time."""
    engine, _, participation_repo, *_ = mocks
    participation = _participation()
    participation_repo.get_by_id = AsyncMock(return_value=participation)

    await engine.approve_participation("p1", "agent-1")
    first_decision = participation.decided_at
    await engine.approve_participation("p1", "agent-2")

    assert participation.status == ParticipationStatus.APPROVED.value
    assert participation.approved_by_id == "agent-2"
    assert participation.decided_at >= first_decision


async def test_reject_participation_emails_participant(mocks) -> None:
    engine, _, participation_repo, *_, outbox = mocks
    participation = _participation()
    participation_repo.get_by_id = AsyncMock(return_value=participation)

    await engine.reject_participation("p1")

    assert participation.status == ParticipationStatus.REJECTED.value
    assert participation.decided_at is not None
    assert outbox.emails[0].subject == "Participation refusée : Soirée d'intégration"


async def test_reject_after_approval_keeps_stored_approver(mocks) -> None:
    engine, _, participation_repo, *_ = mocks
    participation = _participation(ParticipationStatus.APPROVED.value)
    participation.approved_by_id = "agent-1"
    participation_repo.get_by_id = AsyncMock(return_value=participation)

    result = await engine.reject_participation("p1")

    assert result.status == ParticipationStatus.REJECTED.value
    assert participation.approved_by_id == "agent-1"


async def test_decide_unknown_participation(mocks) -> None:
    engine, _, participation_repo, *_ = mocks
    participation_repo.get_by_id = AsyncMock(return_value=None)
    with pytest.raises(ResourceNotFoundException):
        await engine.approve_participation("nope", "agent-1")


async def test_toggle_interest_round_trip(event) -> None:
    event_repo = AsyncMock()
    event_repo.get_by_id = AsyncMock(return_value=event)
    interests = _Interests()
    engine = EventWorkflowEngine(
        event_repo, AsyncMock(), interests, AsyncMock(), AsyncMock(), NotificationOutbox()
    )
    assert await engine.toggle_interest("ev1", "user-7") is True
    assert await engine.toggle_interest("ev1", "user-7") is False
    assert interests.pairs == set()


async def test_delete_event_removes_children_first(mocks) -> None:
    engine, event_repo, participation_repo, interest_repo, comment_repo, _ = mocks
    calls: list[str] = []

    def record(name: str) -> AsyncMock:
        return AsyncMock(side_effect=lambda *_: calls.append(name))

    comment_repo.delete_reply_reactions_for_event = record("reply_reactions")
    comment_repo.delete_replies_for_event = record("replies")
    comment_repo.delete_comment_reactions_for_event = record("comment_reactions")
    comment_repo.delete_comments_for_event = record("comments")
    participation_repo.delete_for_event = record("participations")
    interest_repo.delete_for_event = record("interests")
    event_repo.delete_event_row = record("event")

    await engine.delete_event("ev1", make_principal("org-1"))

    assert calls == [
        "reply_reactions",
        "replies",
        "comment_reactions",
        "comments",
        "participations",
        "interests",
        "event",
    ]


async def test_delete_event_by_approver(mocks) -> None:
    engine, event_repo, *_ = mocks
    await engine.delete_event("ev1", make_principal("agent-1", ("AgentEY",)))
    event_repo.delete_event_row.assert_awaited_once_with("ev1")


async def test_delete_event_by_someone_else_is_denied(mocks) -> None:
    engine, event_repo, _, _, comment_repo, _ = mocks
    with pytest.raises(AuthorizationException):
        await engine.delete_event("ev1", make_principal("user-9"))
    comment_repo.delete_reply_reactions_for_event.assert_not_awaited()
    event_repo.delete_event_row.assert_not_awaited()


async def test_user_status(mocks) -> None:
    engine, _, participation_repo, interest_repo, *_ = mocks
    interest_repo.exists = AsyncMock(return_value=True)
    participation_repo.get_by_event_and_user = AsyncMock(
        return_value=_participation(ParticipationStatus.REJECTED.value)
    )
    status = await engine.get_user_status("ev1", "user-7")
    assert status.is_interested is True
    assert status.participation_status == ParticipationStatus.REJECTED.value
