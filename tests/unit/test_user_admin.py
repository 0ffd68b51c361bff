"""UserService and RoleService over the in-memory credential store."""

from html import escape
from unittest.mock import AsyncMock

import pytest

from engage.application.dtos.user import CreateUserCommand
from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.application.services.role_service import RoleService
from engage.application.services.user_service import UserService
from engage.domain.exceptions import ResourceNotFoundException, ValidationException
from engage.infrastructure.external.webhooks import forwarder as hooks
from engage.infrastructure.persistence.models.role import Role
from tests.fakes import FakeUserRepository


@pytest.fixture
def repo():
    return FakeUserRepository()


@pytest.fixture
def outbox():
    return NotificationOutbox()


@pytest.fixture
def users(repo, outbox):
    return UserService(repo, outbox)


async def test_create_user_is_inactive_first_login_employee(users, repo, outbox) -> None:
    result = await users.create_user(
        CreateUserCommand(email="New.Hire@ey.com", full_name="New Hire", department="Tax")
    )

    assert result.is_active is False
    assert result.is_first_login is True
    assert result.roles == ["EmployeeEY"]
    assert repo.roles[result.id] == ["EmployeeEY"]

    [email] = outbox.emails
    assert email.to == "new.hire@ey.com"
    assert email.subject == "Vos identifiants EY Engage"
    # The emailed temporary password is the one stored.
    assert escape(repo.passwords[result.id]) in email.html_body
    assert [w.endpoint for w in outbox.webhooks] == [hooks.USER_CREATED]


async def test_create_user_keeps_requested_roles(users) -> None:
    result = await users.create_user(
        CreateUserCommand(email="agent@ey.com", full_name="Agent", roles=("AgentEY",))
    )
    assert result.roles == ["AgentEY"]


async def test_create_user_duplicate_email(users, repo, outbox) -> None:
    repo.add("taken@ey.com", "Str0ng!Passw0rd")
    with pytest.raises(ValidationException) as exc_info:
        await users.create_user(CreateUserCommand(email="taken@ey.com", full_name="Dup"))
    assert "already taken" in exc_info.value.details["errors"][0]
    assert not outbox


async def test_deactivate_user_ends_session(users, repo) -> None:
    user = repo.add("jane@ey.com", "Str0ng!Passw0rd")
    user.session_id = "session-1"
    user.refresh_token_hash = "hash"

    result = await users.deactivate_user(user.id)

    assert result.is_active is False
    assert user.session_id is None
    assert user.refresh_token_hash is None
    assert user.refresh_token_expires_at is None


async def test_activate_user(users, repo) -> None:
    user = repo.add("jane@ey.com", "Str0ng!Passw0rd", is_active=False)
    assert (await users.activate_user(user.id)).is_active is True


async def test_unknown_user(users) -> None:
    with pytest.raises(ResourceNotFoundException):
        await users.deactivate_user("missing")


@pytest.fixture
def role_repo():
    known = {"AgentEY": Role(id="r-agent", name="AgentEY")}
    repo = AsyncMock()
    repo.get_by_name.side_effect = lambda name: known.get(name)
    repo.create_role.side_effect = lambda name: (
        None if name in known else Role(id="r-new", name=name)
    )
    return repo


async def test_add_role(role_repo, repo) -> None:
    role = await RoleService(role_repo, repo).add_role("  Communication ")
    assert role.name == "Communication"


async def test_add_duplicate_role(role_repo, repo) -> None:
    with pytest.raises(ValidationException):
        await RoleService(role_repo, repo).add_role("AgentEY")


async def test_assign_role(role_repo, repo) -> None:
    user = repo.add("jane@ey.com", "Str0ng!Passw0rd")
    roles = await RoleService(role_repo, repo).assign_role(user.id, "AgentEY")
    assert roles == ["EmployeeEY", "AgentEY"]


async def test_assign_role_twice(role_repo, repo) -> None:
    user = repo.add("jane@ey.com", "Str0ng!Passw0rd", roles=("AgentEY",))
    with pytest.raises(ValidationException):
        await RoleService(role_repo, repo).assign_role(user.id, "AgentEY")


async def test_assign_unknown_user_or_role(role_repo, repo) -> None:
    service = RoleService(role_repo, repo)
    with pytest.raises(ResourceNotFoundException):
        await service.assign_role("missing", "AgentEY")
    user = repo.add("jane@ey.com", "Str0ng!Passw0rd")
    with pytest.raises(ResourceNotFoundException):
        await service.assign_role(user.id, "NoSuchRole")
