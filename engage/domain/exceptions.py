"""Domain exceptions for the Engage application.

Defines domain-level exceptions that represent business rule violations
and authentication failures. Presentation layer maps them to HTTP
responses in engage.core.exception_handlers.
"""

from typing import Any


class EngageException(Exception):
    """Base exception for all Engage application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(EngageException):
    """Raised when input validation or a business rule fails (recoverable by the caller)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[str] | tuple[str, ...] | None = None,
    ) -> None:
        """Initialize with message, optional field name and optional reasons.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
            errors: Optional human-readable reasons (e.g. password policy).
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = list(errors)
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(EngageException):
    """Raised when authentication fails (e.g. missing or malformed token)."""

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_ERROR",
    ) -> None:
        super().__init__(message, error_code)


class InvalidCredentialsException(AuthenticationException):
    """Login failure. Never says whether the account exists."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password", "INVALID_CREDENTIALS")


class TokenExpiredException(AuthenticationException):
    """Access token signature is valid but the token is past its expiry."""

    def __init__(self) -> None:
        super().__init__("Access token expired", "TOKEN_EXPIRED")


class SessionInvalidatedException(AuthenticationException):
    """Token session id no longer matches the user's current session."""

    def __init__(self) -> None:
        super().__init__("Session invalidated; please log in again", "SESSION_INVALIDATED")


class SecurityTokenException(AuthenticationException):
    """Refresh token missing, unknown or expired; caller must log in again."""

    def __init__(self, message: str = "Invalid or expired refresh token") -> None:
        super().__init__(message, "SECURITY_TOKEN_ERROR")


class UnauthorizedException(EngageException):
    """Authenticated, but the account state forbids the operation.

    Covers deactivated accounts and a pending mandatory password change.
    """

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, "UNAUTHORIZED")


class AuthorizationException(EngageException):
    """Raised when the user lacks the role required for the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'event', 'comment').
            action: Optional action that was attempted (e.g. 'approve', 'delete').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action:
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(EngageException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'event', 'participation').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidStatusTransitionException(EngageException):
    """Raised when a status change is requested from a state that does not allow it."""

    def __init__(self, resource_type: str, current: str, target: str) -> None:
        super().__init__(
            f"Cannot move {resource_type} from {current} to {target}",
            "INVALID_STATUS_TRANSITION",
            {"resource_type": resource_type, "current": current, "target": target},
        )


class DeliveryError(EngageException):
    """Email or webhook collaborator failed to deliver a message."""

    def __init__(self, channel: str, reason: str) -> None:
        super().__init__(
            f"{channel} delivery failed: {reason}",
            "DELIVERY_ERROR",
            {"channel": channel},
        )


class SqlNotConfiguredException(EngageException):
    """Raised when the database engine could not be configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
