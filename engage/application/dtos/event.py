"""DTOs for event and participation use cases (no dependency on ORM or presentation schemas)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class EventResult:
    """Event read-model."""

    id: str
    title: str
    description: str
    date: datetime
    location: str
    image_path: str | None
    status: str
    organizer_id: str | None
    approved_by_id: str | None
    created_at: datetime
    organizer_name: str | None = None
    organizer_department: str | None = None


@dataclass(frozen=True)
class CreateEventCommand:
    """Input for creating an event (write-model)."""

    title: str
    description: str
    date: datetime
    location: str
    image_path: str | None = None


@dataclass(frozen=True)
class ParticipationResult:
    """Participation read-model."""

    id: str
    event_id: str
    user_id: str
    status: str
    requested_at: datetime
    decided_at: datetime | None
    approved_by_id: str | None


@dataclass(frozen=True)
class ParticipationRequestView:
    """Participation joined with event and user display fields (approver listing)."""

    id: str
    event_id: str
    event_title: str
    event_date: datetime
    user_id: str
    user_full_name: str
    user_email: str
    user_department: str | None
    status: str
    requested_at: datetime
    decided_at: datetime | None


@dataclass(frozen=True)
class UserSummary:
    """Minimal user card for participant / interested lists."""

    id: str
    full_name: str
    email: str
    department: str | None
    profile_picture: str | None = None


@dataclass(frozen=True)
class UserEventStatus:
    """Whether a user is interested in an event and where their participation stands."""

    event_id: str
    user_id: str
    is_interested: bool
    participation_status: str | None


@dataclass(frozen=True)
class ProfileEvents:
    """Events shown on a user's profile."""

    organized: list[EventResult]
    participating: list[EventResult]
    interested: list[EventResult]
