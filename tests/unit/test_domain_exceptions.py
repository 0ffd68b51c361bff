"""Tests for domain exceptions (error_code, message, details) and their HTTP status."""

import pytest

from engage.core.exception_handlers import status_for
from engage.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DeliveryError,
    EngageException,
    InvalidCredentialsException,
    InvalidStatusTransitionException,
    ResourceNotFoundException,
    SecurityTokenException,
    SessionInvalidatedException,
    SqlNotConfiguredException,
    TokenExpiredException,
    UnauthorizedException,
    ValidationException,
)


def test_engage_exception_default_error_code() -> None:
    """Base EngageException uses class name as error_code when not provided."""
    exc = EngageException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "EngageException"
    assert exc.details == {}


def test_to_dict_is_the_error_body() -> None:
    exc = EngageException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.to_dict() == {"error": "CUSTOM", "message": "Oops", "details": {"key": "value"}}


def test_validation_exception_field_and_errors() -> None:
    exc = ValidationException("Password change failed", field="new_password", errors=("a", "b"))
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "new_password", "errors": ["a", "b"]}


def test_validation_exception_without_field() -> None:
    assert ValidationException("Bad input").details == {}


def test_invalid_credentials_is_generic() -> None:
    """The message never says whether the account exists."""
    exc = InvalidCredentialsException()
    assert isinstance(exc, AuthenticationException)
    assert exc.error_code == "INVALID_CREDENTIALS"
    assert "not found" not in exc.message.lower()


def test_authorization_exception_message_from_resource_and_action() -> None:
    exc = AuthorizationException("event", "approve")
    assert exc.message == "Permission denied: approve on event"
    assert exc.details == {"resource": "event", "action": "approve"}


def test_resource_not_found_details() -> None:
    exc = ResourceNotFoundException("participation", "p1")
    assert exc.details == {"resource_type": "participation", "resource_id": "p1"}


def test_invalid_status_transition_details() -> None:
    exc = InvalidStatusTransitionException("event", "Approved", "Rejected")
    assert exc.details == {"resource_type": "event", "current": "Approved", "target": "Rejected"}


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (InvalidCredentialsException(), 401),
        (AuthenticationException(), 401),
        (TokenExpiredException(), 401),
        (SessionInvalidatedException(), 401),
        (SecurityTokenException(), 401),
        (UnauthorizedException(), 401),
        (AuthorizationException(), 403),
        (ValidationException("x"), 400),
        (ResourceNotFoundException("event", "e1"), 404),
        (InvalidStatusTransitionException("event", "Approved", "Approved"), 409),
        (DeliveryError("email", "down"), 502),
        (SqlNotConfiguredException(), 503),
        (EngageException("unmapped"), 400),
    ],
)
def test_status_for_error_codes(exc: EngageException, status: int) -> None:
    assert status_for(exc) == status
