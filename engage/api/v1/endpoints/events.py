"""Event API: thin routes delegating to EventWorkflowEngine.

Approve/reject routes (events and participations) require an approver role;
the engine itself does not check roles. Fixed paths are declared before
/{event_id} so they are not captured by it.
"""

from fastapi import APIRouter, Query, Request

from engage.api.v1.dependencies import (
    Approver,
    CurrentUser,
    EventQueryDep,
    WorkflowDep,
)
from engage.application.dtos.event import CreateEventCommand
from engage.core.limiter import limit_writes
from engage.domain.enums import APPROVER_ROLES, Department, EventStatus, ParticipationStatus
from engage.domain.exceptions import AuthorizationException
from engage.schemas.auth import MessageResponse
from engage.schemas.event import (
    EventCreateRequest,
    EventResponse,
    InterestToggleResponse,
    ParticipationRequestResponse,
    ParticipationResponse,
    ProfileEventsResponse,
    UserEventStatusResponse,
    UserSummaryResponse,
)

router = APIRouter()


@router.get("", response_model=list[EventResponse])
async def list_events(
    user: CurrentUser,
    events: EventQueryDep,
    status: EventStatus = Query(default=EventStatus.APPROVED),
    department: Department | None = Query(default=None),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
):
    """List events by status. Only approvers may list non-approved events."""
    if status != EventStatus.APPROVED and not user.has_any_role(APPROVER_ROLES):
        raise AuthorizationException("event", "list")
    results = await events.list_events(
        status=status,
        department=department.value if department else None,
        skip=skip,
        limit=limit,
    )
    return [EventResponse.model_validate(e) for e in results]


@router.post("", response_model=EventResponse, status_code=201)
@limit_writes
async def create_event(
    request: Request, body: EventCreateRequest, user: CurrentUser, workflow: WorkflowDep
):
    """Create an event in Pending; the current user is the organizer."""
    result = await workflow.create_event(
        user.id,
        CreateEventCommand(
            title=body.title,
            description=body.description,
            date=body.date,
            location=body.location,
            image_path=body.image_path,
        ),
    )
    return EventResponse.model_validate(result)


@router.get("/organizer/me", response_model=list[EventResponse])
async def list_my_events(user: CurrentUser, events: EventQueryDep):
    return [EventResponse.model_validate(e) for e in await events.list_organizer_events(user.id)]


@router.get("/profile", response_model=ProfileEventsResponse)
async def profile_events(user: CurrentUser, events: EventQueryDep):
    """Events the current user organizes, participates in, or is interested in."""
    return ProfileEventsResponse.model_validate(await events.get_profile_events(user.id))


@router.get("/participation-requests", response_model=list[ParticipationRequestResponse])
async def list_participation_requests(
    approver: Approver,
    events: EventQueryDep,
    status: ParticipationStatus = Query(default=ParticipationStatus.PENDING),
):
    results = await events.list_participation_requests(status)
    return [ParticipationRequestResponse.model_validate(r) for r in results]


@router.post("/participations/{participation_id}/approve", response_model=ParticipationResponse)
@limit_writes
async def approve_participation(
    request: Request, participation_id: str, approver: Approver, workflow: WorkflowDep
):
    """Approve a request; the participant is emailed after the commit."""
    result = await workflow.approve_participation(participation_id, approver.id)
    return ParticipationResponse.model_validate(result)


@router.post("/participations/{participation_id}/reject", response_model=ParticipationResponse)
@limit_writes
async def reject_participation(
    request: Request, participation_id: str, approver: Approver, workflow: WorkflowDep
):
    result = await workflow.reject_participation(participation_id)
    return ParticipationResponse.model_validate(result)


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, user: CurrentUser, events: EventQueryDep):
    return EventResponse.model_validate(await events.get_event(event_id))


@router.post("/{event_id}/approve", response_model=EventResponse)
@limit_writes
async def approve_event(request: Request, event_id: str, approver: Approver, workflow: WorkflowDep):
    return EventResponse.model_validate(await workflow.approve_event(event_id, approver.id))


@router.post("/{event_id}/reject", response_model=EventResponse)
@limit_writes
async def reject_event(request: Request, event_id: str, approver: Approver, workflow: WorkflowDep):
    return EventResponse.model_validate(await workflow.reject_event(event_id, approver.id))


@router.delete("/{event_id}", response_model=MessageResponse)
@limit_writes
async def delete_event(request: Request, event_id: str, user: CurrentUser, workflow: WorkflowDep):
    """Delete an event with its comments, participations and interests."""
    await workflow.delete_event(event_id, user)
    return MessageResponse(message="Event deleted")


@router.post("/{event_id}/participate", response_model=ParticipationResponse)
@limit_writes
async def request_participation(
    request: Request, event_id: str, user: CurrentUser, workflow: WorkflowDep
):
    """Request (or re-request) participation; the request goes back to Pending."""
    result = await workflow.request_participation(event_id, user.id)
    return ParticipationResponse.model_validate(result)


@router.post("/{event_id}/interest", response_model=InterestToggleResponse)
@limit_writes
async def toggle_interest(request: Request, event_id: str, user: CurrentUser, workflow: WorkflowDep):
    is_interested = await workflow.toggle_interest(event_id, user.id)
    return InterestToggleResponse(event_id=event_id, is_interested=is_interested)


@router.get("/{event_id}/participants", response_model=list[UserSummaryResponse])
async def get_participants(event_id: str, user: CurrentUser, events: EventQueryDep):
    return [UserSummaryResponse.model_validate(u) for u in await events.get_participants(event_id)]


@router.get("/{event_id}/interested", response_model=list[UserSummaryResponse])
async def get_interested_users(event_id: str, user: CurrentUser, events: EventQueryDep):
    users = await events.get_interested_users(event_id)
    return [UserSummaryResponse.model_validate(u) for u in users]


@router.get("/{event_id}/status", response_model=UserEventStatusResponse)
async def get_user_status(event_id: str, user: CurrentUser, events: EventQueryDep):
    """Whether the current user is interested and where their participation stands."""
    return UserEventStatusResponse.model_validate(await events.get_user_status(event_id, user.id))
