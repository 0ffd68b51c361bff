"""Tests for account state (role bypass) and event lifecycle rules."""

from datetime import datetime, timezone

import pytest

from engage.domain.entities.account import AccountState
from engage.domain.entities.event import check_event_transition, validate_event_fields
from engage.domain.enums import APPROVER_ROLES, EventStatus, RoleName
from engage.domain.exceptions import InvalidStatusTransitionException, ValidationException

_WHEN = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)


def test_new_account_needs_password_change() -> None:
    state = AccountState.from_stored(False, True, ["EmployeeEY"])
    assert state.needs_password_change


def test_active_account_past_first_login_does_not() -> None:
    state = AccountState.from_stored(True, False, ["EmployeeEY"])
    assert not state.needs_password_change


def test_super_admin_bypasses_activation_flags() -> None:
    """SuperAdmin is always active and never on first login."""
    state = AccountState.from_stored(False, True, [RoleName.SUPER_ADMIN.value])
    assert state.is_active is True
    assert state.is_first_login is False
    assert not state.needs_password_change


def test_admin_gets_no_bypass() -> None:
    state = AccountState.from_stored(False, True, [RoleName.ADMIN.value])
    assert state.needs_password_change


def test_approver_roles() -> None:
    assert APPROVER_ROLES == {"SuperAdmin", "Admin", "AgentEY"}
    assert AccountState.from_stored(True, False, ["AgentEY"]).has_any_role(APPROVER_ROLES)
    assert not AccountState.from_stored(True, False, ["EmployeeEY"]).has_any_role(APPROVER_ROLES)


@pytest.mark.parametrize("target", [EventStatus.APPROVED, EventStatus.REJECTED])
def test_pending_event_can_be_decided(target: EventStatus) -> None:
    check_event_transition(EventStatus.PENDING, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (EventStatus.APPROVED, EventStatus.REJECTED),
        (EventStatus.REJECTED, EventStatus.APPROVED),
        (EventStatus.APPROVED, EventStatus.APPROVED),
        (EventStatus.DRAFT, EventStatus.APPROVED),
    ],
)
def test_only_pending_events_move(current: EventStatus, target: EventStatus) -> None:
    with pytest.raises(InvalidStatusTransitionException) as exc_info:
        check_event_transition(current.value, target)
    assert exc_info.value.details["current"] == current.value


def test_validate_event_fields_accepts_valid_input() -> None:
    validate_event_fields("Afterwork", "Paris La Défense", _WHEN)


@pytest.mark.parametrize(
    ("title", "location", "date", "field"),
    [
        ("", "Paris", _WHEN, "title"),
        ("x" * 201, "Paris", _WHEN, "title"),
        ("Afterwork", "  ", _WHEN, "location"),
        ("Afterwork", "Paris", datetime(2026, 6, 1, 18, 0), "date"),
    ],
)
def test_validate_event_fields_rejects(
    title: str, location: str, date: datetime, field: str
) -> None:
    with pytest.raises(ValidationException) as exc_info:
        validate_event_fields(title, location, date)
    assert exc_info.value.details["field"] == field
