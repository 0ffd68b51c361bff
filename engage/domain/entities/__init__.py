"""Domain entities and lifecycle rules.

Pure domain models; no ORM or persistence concerns.
"""

from engage.domain.entities.account import AccountState
from engage.domain.entities.event import check_event_transition, validate_event_fields

__all__ = [
    "AccountState",
    "check_event_transition",
    "validate_event_fields",
]
