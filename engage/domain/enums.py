"""Domain enumerations for the Engage application.

Enums represent fixed sets of domain values (roles, departments, and the
event / participation statuses).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class RoleName(_ValuesMixin, str, Enum):
    """Built-in roles. SUPER_ADMIN is the highest-privilege administrative role."""

    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    AGENT_EY = "AgentEY"
    EMPLOYEE_EY = "EmployeeEY"


# Roles allowed to move events and participations out of Pending.
APPROVER_ROLES: frozenset[str] = frozenset(
    {RoleName.SUPER_ADMIN.value, RoleName.ADMIN.value, RoleName.AGENT_EY.value}
)

# Roles allowed to manage users and the role catalogue.
ADMIN_ROLES: frozenset[str] = frozenset(
    {RoleName.SUPER_ADMIN.value, RoleName.ADMIN.value}
)


class Department(_ValuesMixin, str, Enum):
    """Service lines a user (and therefore an organizer) belongs to."""

    ASSURANCE = "Assurance"
    CONSULTING = "Consulting"
    STRATEGY_AND_TRANSACTIONS = "StrategyAndTransactions"
    TAX = "Tax"


class EventStatus(_ValuesMixin, str, Enum):
    """Event approval status. New events start in PENDING."""

    DRAFT = "Draft"
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class ParticipationStatus(_ValuesMixin, str, Enum):
    """Participation request status."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
