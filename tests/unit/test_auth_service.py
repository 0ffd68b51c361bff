"""AuthService workflow over an in-memory credential store.

Covers the first-login flow (login without tokens, forced password change),
session rotation, refresh and password reset.
"""

from datetime import timedelta

import pytest

from engage.application.services.auth_service import AuthService
from engage.application.services.notification_dispatcher import NotificationOutbox
from engage.application.services.token_service import TokenService, hash_refresh_token
from engage.domain.exceptions import (
    InvalidCredentialsException,
    SecurityTokenException,
    SessionInvalidatedException,
    UnauthorizedException,
    ValidationException,
)
from engage.infrastructure.external.webhooks import forwarder as hooks
from engage.shared.utils.datetime import utc_now
from tests.fakes import FakeUserRepository

PASSWORD = "Str0ng!Passw0rd"
NEW_PASSWORD = "N3w!Passw0rd"


@pytest.fixture
def repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def outbox() -> NotificationOutbox:
    return NotificationOutbox()


@pytest.fixture
def auth(repo: FakeUserRepository, outbox: NotificationOutbox) -> AuthService:
    return AuthService(repo, TokenService(repo), outbox)


async def test_first_login_returns_no_tokens(repo, auth) -> None:
    """An inactive first-login account gets its flags back, never a token pair."""
    user = repo.add("new.joiner@ey.com", PASSWORD, is_active=False, is_first_login=True)
    result = await auth.login("new.joiner@ey.com", PASSWORD)
    assert result.tokens is None
    assert result.needs_password_change
    assert result.user.is_active is False
    assert result.user.is_first_login is True
    assert user.session_id is not None
    assert user.refresh_token_hash is None


async def test_change_password_activates_and_issues_tokens(repo, auth, outbox) -> None:
    user = repo.add("new.joiner@ey.com", PASSWORD, is_active=False, is_first_login=True)
    await auth.login("new.joiner@ey.com", PASSWORD)
    first_session = user.session_id

    result = await auth.change_password("new.joiner@ey.com", PASSWORD, NEW_PASSWORD, NEW_PASSWORD)

    assert result.tokens is not None
    assert result.user.is_active is True
    assert result.user.is_first_login is False
    assert user.is_active and not user.is_first_login
    assert user.session_id != first_session
    assert user.refresh_token_hash == hash_refresh_token(result.tokens.refresh_token)
    assert [w.endpoint for w in outbox.webhooks] == [hooks.USER_ACTIVATED]
    assert (await auth.login("new.joiner@ey.com", NEW_PASSWORD)).tokens is not None


async def test_change_password_mismatch_mutates_nothing(repo, auth, outbox) -> None:
    user = repo.add("new.joiner@ey.com", PASSWORD, is_active=False, is_first_login=True)
    with pytest.raises(ValidationException) as exc_info:
        await auth.change_password("new.joiner@ey.com", PASSWORD, NEW_PASSWORD, "Other!Passw0rd")
    assert exc_info.value.details["field"] == "confirm_password"
    assert repo.passwords[user.id] == PASSWORD
    assert user.is_active is False
    assert user.session_id is None
    assert len(outbox) == 0


async def test_change_password_wrong_current_password(repo, auth) -> None:
    repo.add("new.joiner@ey.com", PASSWORD, is_active=False, is_first_login=True)
    with pytest.raises(ValidationException):
        await auth.change_password("new.joiner@ey.com", "Wr0ng!pass", NEW_PASSWORD, NEW_PASSWORD)


async def test_change_password_policy_failure_lists_reasons(repo, auth) -> None:
    repo.add("new.joiner@ey.com", PASSWORD, is_active=False, is_first_login=True)
    with pytest.raises(ValidationException) as exc_info:
        await auth.change_password("new.joiner@ey.com", PASSWORD, "short", "short")
    assert exc_info.value.details["errors"]


async def test_active_user_login_issues_pair(repo, auth) -> None:
    user = repo.add("jane.doe@ey.com", PASSWORD)
    result = await auth.login("JANE.DOE@ey.com", PASSWORD)
    assert result.tokens is not None
    assert user.refresh_token_hash == hash_refresh_token(result.tokens.refresh_token)
    assert user.refresh_token_expires_at > utc_now()


async def test_login_rotates_session_and_old_token_is_rejected(repo, auth) -> None:
    repo.add("jane.doe@ey.com", PASSWORD)
    first = await auth.login("jane.doe@ey.com", PASSWORD)
    second = await auth.login("jane.doe@ey.com", PASSWORD)
    tokens = TokenService(repo)

    principal = await tokens.validate_access_token(second.tokens.access_token)
    assert principal.email == "jane.doe@ey.com"
    with pytest.raises(SessionInvalidatedException):
        await tokens.validate_access_token(first.tokens.access_token)


@pytest.mark.parametrize(
    ("email", "password"),
    [("jane.doe@ey.com", "Wr0ng!pass"), ("nobody@ey.com", PASSWORD)],
)
async def test_login_failures_look_the_same(repo, auth, email: str, password: str) -> None:
    repo.add("jane.doe@ey.com", PASSWORD)
    with pytest.raises(InvalidCredentialsException) as exc_info:
        await auth.login(email, password)
    assert exc_info.value.message == "Invalid email or password"


async def test_super_admin_logs_in_despite_flags(repo, auth) -> None:
    repo.add("root@ey.com", PASSWORD, roles=("SuperAdmin",), is_active=False, is_first_login=True)
    result = await auth.login("root@ey.com", PASSWORD)
    assert result.tokens is not None
    assert result.user.is_active and not result.user.is_first_login


async def test_refresh_rotates_pair(repo, auth) -> None:
    user = repo.add("jane.doe@ey.com", PASSWORD)
    login = await auth.login("jane.doe@ey.com", PASSWORD)
    session_before = user.session_id

    refreshed = await auth.refresh(login.tokens.refresh_token)

    assert refreshed.tokens.refresh_token != login.tokens.refresh_token
    assert user.session_id != session_before
    with pytest.raises(SecurityTokenException):
        await auth.refresh(login.tokens.refresh_token)


async def test_refresh_with_expired_token_changes_nothing(repo, auth) -> None:
    user = repo.add("jane.doe@ey.com", PASSWORD)
    login = await auth.login("jane.doe@ey.com", PASSWORD)
    expired_at = utc_now() - timedelta(minutes=1)
    user.refresh_token_expires_at = expired_at
    stored_hash = user.refresh_token_hash
    stored_session = user.session_id

    with pytest.raises(SecurityTokenException):
        await auth.refresh(login.tokens.refresh_token)

    assert user.refresh_token_hash == stored_hash
    assert user.refresh_token_expires_at == expired_at
    assert user.session_id == stored_session


@pytest.mark.parametrize("token", [None, "", "unknown-refresh-token"])
async def test_refresh_with_missing_or_unknown_token(repo, auth, token) -> None:
    repo.add("jane.doe@ey.com", PASSWORD)
    with pytest.raises(SecurityTokenException):
        await auth.refresh(token)


async def test_refresh_requires_completed_first_login(repo, auth) -> None:
    user = repo.add("jane.doe@ey.com", PASSWORD)
    login = await auth.login("jane.doe@ey.com", PASSWORD)
    user.is_first_login = True
    with pytest.raises(UnauthorizedException):
        await auth.refresh(login.tokens.refresh_token)


async def test_logout_clears_session(repo, auth) -> None:
    user = repo.add("jane.doe@ey.com", PASSWORD)
    await auth.login("jane.doe@ey.com", PASSWORD)
    await auth.logout(user.id)
    assert user.session_id is None
    assert user.refresh_token_hash is None
    assert user.refresh_token_expires_at is None


async def test_logout_unknown_user_is_silent(auth) -> None:
    await auth.logout("ghost")


async def test_register_creates_inactive_employee(repo, auth, outbox) -> None:
    principal = await auth.register("Jane Doe", "jane.doe@ey.com", PASSWORD, "Tax")
    assert principal.roles == {"EmployeeEY"}
    assert principal.needs_password_change
    assert outbox.webhooks[0].endpoint == hooks.USER_CREATED
    assert outbox.webhooks[0].payload["email"] == "jane.doe@ey.com"


async def test_register_duplicate_email(repo, auth) -> None:
    repo.add("jane.doe@ey.com", PASSWORD)
    with pytest.raises(ValidationException) as exc_info:
        await auth.register("Jane Doe", "jane.doe@ey.com", PASSWORD)
    assert "already taken" in exc_info.value.details["errors"][0]


async def test_forgot_password_unknown_email_sends_nothing(auth, outbox) -> None:
    await auth.forgot_password("nobody@ey.com")
    assert len(outbox) == 0


async def test_forgot_then_reset_password_ends_sessions(repo, auth, outbox) -> None:
    user = repo.add("jane.doe@ey.com", PASSWORD)
    await auth.login("jane.doe@ey.com", PASSWORD)

    await auth.forgot_password("jane.doe@ey.com")
    [email] = outbox.emails
    assert email.to == "jane.doe@ey.com"
    token = next(iter(repo.reset_tokens))
    assert "/reset-password?email=jane.doe%40ey.com&amp;token=" in email.html_body

    await auth.reset_password("jane.doe@ey.com", token, NEW_PASSWORD)
    assert repo.passwords[user.id] == NEW_PASSWORD
    assert user.session_id is None
    assert user.refresh_token_hash is None


async def test_reset_password_with_bad_token(repo, auth) -> None:
    repo.add("jane.doe@ey.com", PASSWORD)
    with pytest.raises(ValidationException) as exc_info:
        await auth.reset_password("jane.doe@ey.com", "bogus", NEW_PASSWORD)
    assert exc_info.value.details["errors"] == ["Invalid token."]


async def test_check_email(repo, auth) -> None:
    repo.add("jane.doe@ey.com", PASSWORD)
    assert await auth.check_email("jane.doe@ey.com")
    assert not await auth.check_email("nobody@ey.com")
