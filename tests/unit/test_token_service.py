"""TokenService: issuing pairs and validating access tokens against the stored session."""

from datetime import timedelta

import pytest

from engage.application.services.token_service import (
    TokenService,
    hash_refresh_token,
    load_principal,
)
from engage.domain.exceptions import (
    AuthenticationException,
    SessionInvalidatedException,
    TokenExpiredException,
    UnauthorizedException,
)
from engage.infrastructure.security.claims import to_jwt_claims
from engage.infrastructure.security.jwt import create_access_token
from engage.shared.utils.datetime import utc_now
from tests.fakes import FakeUserRepository, make_principal


@pytest.fixture
def repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def tokens(repo: FakeUserRepository) -> TokenService:
    return TokenService(repo)


async def _login(repo: FakeUserRepository, tokens: TokenService, **kwargs) -> tuple[str, str]:
    """Store a user with a fresh session; return (user_id, access_token)."""
    user = repo.add("jane.doe@ey.com", "Str0ng!Passw0rd", **kwargs)
    session_id = tokens.new_session_id()
    user.session_id = session_id
    pair = tokens.issue_token_pair(await load_principal(repo, user), session_id)
    return user.id, pair.access_token


def test_issue_token_pair(tokens: TokenService) -> None:
    pair = tokens.issue_token_pair(make_principal(), "sess-1")
    assert pair.token_type == "bearer"
    assert pair.expires_in == 15 * 60
    assert pair.refresh_token_expires_at > utc_now() + timedelta(days=6)
    assert len(pair.refresh_token) >= 64
    assert tokens.hash_refresh_token(pair.refresh_token) == hash_refresh_token(pair.refresh_token)
    assert hash_refresh_token(pair.refresh_token) != pair.refresh_token


def test_session_ids_are_unique(tokens: TokenService) -> None:
    assert len({tokens.new_session_id() for _ in range(50)}) == 50


async def test_valid_token_returns_principal(repo, tokens) -> None:
    user_id, access = await _login(repo, tokens)
    principal = await tokens.validate_access_token(access)
    assert principal.id == user_id
    assert principal.roles == {"EmployeeEY"}


async def test_rotated_session_invalidates_token(repo, tokens) -> None:
    user_id, access = await _login(repo, tokens)
    repo.users[user_id].session_id = tokens.new_session_id()
    with pytest.raises(SessionInvalidatedException):
        await tokens.validate_access_token(access)


async def test_cleared_session_invalidates_token(repo, tokens) -> None:
    user_id, access = await _login(repo, tokens)
    repo.users[user_id].session_id = None
    with pytest.raises(SessionInvalidatedException):
        await tokens.validate_access_token(access)


async def test_deactivated_account_is_unauthorized(repo, tokens) -> None:
    user_id, access = await _login(repo, tokens)
    repo.users[user_id].is_active = False
    with pytest.raises(UnauthorizedException):
        await tokens.validate_access_token(access)


async def test_super_admin_is_never_deactivated(repo, tokens) -> None:
    user_id, access = await _login(repo, tokens, roles=("SuperAdmin",))
    repo.users[user_id].is_active = False
    principal = await tokens.validate_access_token(access)
    assert principal.is_active


async def test_unknown_user(repo, tokens) -> None:
    access = tokens.issue_access_token(make_principal("ghost"), "sess")
    with pytest.raises(AuthenticationException):
        await tokens.validate_access_token(access)


async def test_expired_token(repo, tokens) -> None:
    token = create_access_token(
        to_jwt_claims(make_principal(), "sess", token_id="j"), expires_delta=timedelta(seconds=-1)
    )
    with pytest.raises(TokenExpiredException):
        await tokens.validate_access_token(token)


async def test_garbage_token(tokens) -> None:
    with pytest.raises(AuthenticationException) as exc_info:
        await tokens.validate_access_token("not-a-jwt")
    assert exc_info.value.error_code == "AUTHENTICATION_ERROR"
