"""Domain exceptions for the ATS backend.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any

INVALID_OR_EXPIRED_TOKEN_MESSAGE = "Invalid or expired token"


class AtsException(Exception):
    """Base exception for all ATS application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

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
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(AtsException):
    """Raised when input validation fails (e.g. missing field or short password)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(AtsException):
    """Raised when authentication fails (e.g. invalid credentials or credential token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(AtsException):
    """Raised when the caller's role does not allow the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'account', 'staff').
            action: Optional action that was attempted (e.g. 'approve', 'create').
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


class AccountNotApprovedException(AtsException):
    """Raised at login when the account is still waiting for super-tenant approval."""

    def __init__(self) -> None:
        super().__init__(
            "Account is pending approval",
            "ACCOUNT_NOT_APPROVED",
        )


class AccountAlreadyExistsException(AtsException):
    """Raised when the email or username of a new account is already registered."""

    def __init__(self, field: str | None = None) -> None:
        """Initialize with the conflicting field when known.

        Args:
            field: 'email' or 'username'; None when the conflict came from the
                storage constraint and the column is not known.
        """
        message = (
            f"An account with this {field} already exists"
            if field
            else "An account with this email or username already exists"
        )
        super().__init__(
            message,
            "ACCOUNT_ALREADY_EXISTS",
            {"field": field} if field else {},
        )


class ResourceNotFoundException(AtsException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'account').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AlreadyApprovedException(AtsException):
    """Raised when approving an account that is already approved."""

    def __init__(self, account_id: str) -> None:
        super().__init__(
            "Account is already approved",
            "ALREADY_APPROVED",
            {"account_id": account_id},
        )


class InvalidStateException(AtsException):
    """Raised when an operation is not allowed in the entity's current state."""

    def __init__(self, message: str, **details: Any) -> None:
        """Initialize with message and optional context.

        Args:
            message: Human-readable description (e.g. 'Account is already approved').
            **details: Extra keys for details (e.g. account_id).
        """
        super().__init__(message, "INVALID_STATE", details)


class InvalidOrExpiredTokenException(AtsException):
    """Raised when a single-use token cannot be redeemed.

    Not-found, expired and already-used are deliberately one error to callers:
    subclasses exist so logs can tell them apart, but all share error_code and
    message, and carry no details.
    """

    reason = "invalid"

    def __init__(self) -> None:
        super().__init__(INVALID_OR_EXPIRED_TOKEN_MESSAGE, "INVALID_OR_EXPIRED_TOKEN")


class TokenAlreadyUsedException(InvalidOrExpiredTokenException):
    """Token exists but was already redeemed."""

    reason = "used"


class TokenExpiredException(InvalidOrExpiredTokenException):
    """Token exists and is unused but past its expiry."""

    reason = "expired"


class TransientStorageFailureException(AtsException):
    """Raised when storage stays unreachable after the retry budget is spent."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            "Service temporarily unavailable. Please try again in a moment.",
            "SERVICE_UNAVAILABLE",
            {"attempts": attempts},
        )


class DatabaseUnreachableException(AtsException):
    """Raised at startup when the database host has no usable address family."""

    def __init__(self, host: str, reason: str) -> None:
        super().__init__(
            f"Database host {host!r} is unreachable: {reason}",
            "SERVICE_UNAVAILABLE",
            {"host": host},
        )


class SqlNotConfiguredException(AtsException):
    """Raised when an operation requires the database but none is configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
