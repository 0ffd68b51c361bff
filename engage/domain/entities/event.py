"""Event lifecycle rules.

Pending events may be approved or rejected; nothing else moves an event's
status. Participation decisions are not guarded (last writer wins).
"""

from datetime import datetime

from engage.domain.enums import EventStatus
from engage.domain.exceptions import InvalidStatusTransitionException, ValidationException

_EVENT_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.PENDING: frozenset({EventStatus.APPROVED, EventStatus.REJECTED}),
}

TITLE_MAX_LENGTH = 200
LOCATION_MAX_LENGTH = 200


def check_event_transition(current: EventStatus | str, target: EventStatus) -> None:
    """Raise InvalidStatusTransitionException unless current -> target is allowed."""
    current_status = EventStatus(current)
    if target not in _EVENT_TRANSITIONS.get(current_status, frozenset()):
        raise InvalidStatusTransitionException("event", current_status.value, target.value)


def validate_event_fields(title: str, location: str, date: datetime) -> None:
    """Validate user-supplied event fields. Raises ValidationException."""
    if not title or not title.strip():
        raise ValidationException("Event title is required", field="title")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationException(
            f"Event title must be at most {TITLE_MAX_LENGTH} characters", field="title"
        )
    if not location or not location.strip():
        raise ValidationException("Event location is required", field="location")
    if len(location) > LOCATION_MAX_LENGTH:
        raise ValidationException(
            f"Event location must be at most {LOCATION_MAX_LENGTH} characters",
            field="location",
        )
    if date.tzinfo is None:
        raise ValidationException("Event date must be timezone-aware", field="date")
