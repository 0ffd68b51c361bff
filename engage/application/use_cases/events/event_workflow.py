"""Event workflow engine: event approval, participation decisions, interest, deletion.

All mutations run inside the caller's transaction. Notifications are only
enqueued on the outbox; they go out after the transaction commits.
"""

from __future__ import annotations

from engage.application.dtos.auth import AuthenticatedUser
from engage.application.dtos.event import (
    CreateEventCommand,
    EventResult,
    ParticipationRequestView,
    ParticipationResult,
    ProfileEvents,
    UserEventStatus,
    UserSummary,
)
from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.domain.entities.event import check_event_transition, validate_event_fields
from engage.domain.enums import APPROVER_ROLES, EventStatus, ParticipationStatus
from engage.domain.exceptions import AuthorizationException, ResourceNotFoundException
from engage.infrastructure.external.email import templates
from engage.infrastructure.external.webhooks import forwarder as hooks
from engage.infrastructure.persistence.models.event import Event
from engage.infrastructure.persistence.models.participation import EventParticipation
from engage.infrastructure.persistence.repositories.comment_repo import CommentRepository
from engage.infrastructure.persistence.repositories.event_repo import EventRepository
from engage.infrastructure.persistence.repositories.participation_repo import (
    InterestRepository,
    ParticipationRepository,
)
from engage.infrastructure.persistence.repositories.user_repo import UserRepository
from engage.shared.telemetry.logging import get_logger
from engage.shared.telemetry.tracing import traced
from engage.shared.utils.datetime import ensure_utc, utc_now
from engage.shared.utils.sanitization import sanitize_text

logger = get_logger(__name__)


def participation_to_result(p: EventParticipation) -> ParticipationResult:
    return ParticipationResult(
        id=p.id,
        event_id=p.event_id,
        user_id=p.user_id,
        status=p.status,
        requested_at=p.requested_at,
        decided_at=p.decided_at,
        approved_by_id=p.approved_by_id,
    )


class EventWorkflowEngine:
    """Owns every status change of events and participations.

    Role checks for approvers are done by the HTTP dependencies; the engine
    only enforces the event transition table and resource existence.
    """

    def __init__(
        self,
        event_repo: EventRepository,
        participation_repo: ParticipationRepository,
        interest_repo: InterestRepository,
        comment_repo: CommentRepository,
        user_repo: UserRepository,
        outbox: NotificationOutbox | None = None,
    ) -> None:
        self.event_repo = event_repo
        self.participation_repo = participation_repo
        self.interest_repo = interest_repo
        self.comment_repo = comment_repo
        self.user_repo = user_repo
        self.outbox = outbox if outbox is not None else NotificationOutbox()

    async def _get_event_row(self, event_id: str) -> Event:
        event = await self.event_repo.get_by_id(event_id)
        if event is None:
            raise ResourceNotFoundException("event", event_id)
        return event

    async def _get_participation_row(self, participation_id: str) -> EventParticipation:
        participation = await self.participation_repo.get_by_id(participation_id)
        if participation is None:
            raise ResourceNotFoundException("participation", participation_id)
        return participation

    # ---- events ----

    @traced("event_workflow.create_event")
    async def create_event(self, organizer_id: str, data: CreateEventCommand) -> EventResult:
        """Create a Pending event organized by organizer_id."""
        title = sanitize_text(data.title)
        location = sanitize_text(data.location)
        validate_event_fields(title, location, data.date)
        event = await self.event_repo.create(
            Event(
                title=title,
                description=sanitize_text(data.description or ""),
                date=ensure_utc(data.date),
                location=location,
                image_path=data.image_path,
                status=EventStatus.PENDING.value,
                organizer_id=organizer_id,
            )
        )
        self.outbox.webhook(
            hooks.EVENT_CREATED,
            {
                "event_id": event.id,
                "title": event.title,
                "organizer_id": organizer_id,
                "date": event.date.isoformat(),
            },
        )
        logger.info("Event created: event_id=%s organizer_id=%s", event.id, organizer_id)
        return await self.get_event(event.id)

    async def get_event(self, event_id: str) -> EventResult:
        result = await self.event_repo.get_result(event_id)
        if result is None:
            raise ResourceNotFoundException("event", event_id)
        return result

    async def list_events(
        self,
        status: EventStatus = EventStatus.APPROVED,
        department: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[EventResult]:
        return await self.event_repo.list_by_status(
            status.value, department=department, skip=skip, limit=limit
        )

    async def list_organizer_events(self, organizer_id: str) -> list[EventResult]:
        return await self.event_repo.list_by_organizer(organizer_id)

    async def _decide_event(
        self, event_id: str, approver_id: str, target: EventStatus, endpoint: str
    ) -> EventResult:
        event = await self._get_event_row(event_id)
        check_event_transition(event.status, target)
        event.status = target.value
        # Both decisions record the deciding user in approved_by_id.
        event.approved_by_id = approver_id
        await self.event_repo.update(event)
        self.outbox.webhook(
            endpoint,
            {
                "event_id": event.id,
                "title": event.title,
                "organizer_id": event.organizer_id,
                "approver_id": approver_id,
                "status": event.status,
            },
        )
        logger.info(
            "Event %s: event_id=%s approver_id=%s", target.value.lower(), event_id, approver_id
        )
        return await self.get_event(event_id)

    @traced("event_workflow.approve_event")
    async def approve_event(self, event_id: str, approver_id: str) -> EventResult:
        return await self._decide_event(
            event_id, approver_id, EventStatus.APPROVED, hooks.EVENT_APPROVED
        )

    @traced("event_workflow.reject_event")
    async def reject_event(self, event_id: str, approver_id: str) -> EventResult:
        return await self._decide_event(
            event_id, approver_id, EventStatus.REJECTED, hooks.EVENT_REJECTED
        )

    @traced("event_workflow.delete_event")
    async def delete_event(self, event_id: str, requester: AuthenticatedUser) -> None:
        """Delete the event and everything hanging off it, children first.

        Only the organizer or an approver may delete.
        """
        event = await self._get_event_row(event_id)
        if event.organizer_id != requester.id and not requester.has_any_role(APPROVER_ROLES):
            raise AuthorizationException("event", "delete")
        await self.comment_repo.delete_reply_reactions_for_event(event_id)
        await self.comment_repo.delete_replies_for_event(event_id)
        await self.comment_repo.delete_comment_reactions_for_event(event_id)
        await self.comment_repo.delete_comments_for_event(event_id)
        await self.participation_repo.delete_for_event(event_id)
        await self.interest_repo.delete_for_event(event_id)
        await self.event_repo.delete_event_row(event_id)
        logger.info("Event deleted: event_id=%s by user_id=%s", event_id, requester.id)

    # ---- participation ----

    @traced("event_workflow.request_participation")
    async def request_participation(self, event_id: str, user_id: str) -> ParticipationResult:
        """Create or reset the user's participation to Pending."""
        event = await self._get_event_row(event_id)
        participation = await self.participation_repo.upsert_pending(event_id, user_id)
        self.outbox.webhook(
            hooks.PARTICIPATION_REQUESTED,
            {
                "participation_id": participation.id,
                "event_id": event_id,
                "event_title": event.title,
                "user_id": user_id,
                "organizer_id": event.organizer_id,
            },
        )
        return participation_to_result(participation)

    async def _decide_participation(
        self,
        participation_id: str,
        status: ParticipationStatus,
        approver_id: str | None = None,
    ) -> tuple[EventParticipation, Event]:
        participation = await self._get_participation_row(participation_id)
        event = await self._get_event_row(participation.event_id)
        participation.status = status.value
        participation.decided_at = utc_now()
        if approver_id is not None:
            participation.approved_by_id = approver_id
        await self.participation_repo.update(participation)
        return participation, event

    @traced("event_workflow.approve_participation")
    async def approve_participation(
        self, participation_id: str, approver_id: str
    ) -> ParticipationResult:
        """Approve and notify the participant. Repeating it re-stamps the decision."""
        participation, event = await self._decide_participation(
            participation_id, ParticipationStatus.APPROVED, approver_id
        )
        user = await self.user_repo.get_by_id(participation.user_id)
        if user is not None:
            subject, body = templates.participation_approved(
                user.full_name, event.title, event.date, event.location
            )
            self.outbox.email(user.email, subject, body)
        self.outbox.webhook(
            hooks.PARTICIPATION_APPROVED,
            {
                "participation_id": participation.id,
                "event_id": event.id,
                "event_title": event.title,
                "user_id": participation.user_id,
                "approver_id": approver_id,
            },
        )
        logger.info(
            "Participation approved: participation_id=%s approver_id=%s",
            participation_id,
            approver_id,
        )
        return participation_to_result(participation)

    @traced("event_workflow.reject_participation")
    async def reject_participation(self, participation_id: str) -> ParticipationResult:
        """Reject the request. The stored approver, if any, is left as it was."""
        participation, event = await self._decide_participation(
            participation_id, ParticipationStatus.REJECTED
        )
        user = await self.user_repo.get_by_id(participation.user_id)
        if user is not None:
            subject, body = templates.participation_rejected(user.full_name, event.title)
            self.outbox.email(user.email, subject, body)
        self.outbox.webhook(
            hooks.PARTICIPATION_REJECTED,
            {
                "participation_id": participation.id,
                "event_id": event.id,
                "event_title": event.title,
                "user_id": participation.user_id,
            },
        )
        logger.info("Participation rejected: participation_id=%s", participation_id)
        return participation_to_result(participation)

    async def list_participation_requests(
        self, status: ParticipationStatus = ParticipationStatus.PENDING
    ) -> list[ParticipationRequestView]:
        return await self.participation_repo.list_requests(status.value)

    # ---- interest and read models ----

    async def toggle_interest(self, event_id: str, user_id: str) -> bool:
        """Flip the user's interest. Returns True when the user is now interested."""
        await self._get_event_row(event_id)
        if await self.interest_repo.exists(event_id, user_id):
            await self.interest_repo.remove(event_id, user_id)
            return False
        await self.interest_repo.add(event_id, user_id)
        return True

    async def get_participants(self, event_id: str) -> list[UserSummary]:
        await self._get_event_row(event_id)
        return await self.participation_repo.list_approved_users(event_id)

    async def get_interested_users(self, event_id: str) -> list[UserSummary]:
        await self._get_event_row(event_id)
        return await self.interest_repo.list_users(event_id)

    async def get_user_status(self, event_id: str, user_id: str) -> UserEventStatus:
        await self._get_event_row(event_id)
        participation = await self.participation_repo.get_by_event_and_user(event_id, user_id)
        return UserEventStatus(
            event_id=event_id,
            user_id=user_id,
            is_interested=await self.interest_repo.exists(event_id, user_id),
            participation_status=participation.status if participation else None,
        )

    async def get_profile_events(self, user_id: str) -> ProfileEvents:
        return ProfileEvents(
            organized=await self.event_repo.list_by_organizer(user_id),
            participating=await self.event_repo.list_participating(user_id),
            interested=await self.event_repo.list_interested(user_id),
        )
