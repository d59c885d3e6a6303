"""Domain exceptions for the account service.

Defines domain-level exceptions that represent business rule violations
and credential failures. These exceptions are independent of
infrastructure concerns. Presentation layer maps them to HTTP responses
in exception handlers.
"""

from typing import Any


class AccountServiceException(Exception):
    """Base exception for all account service errors.

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
        """Serialize for API responses (error_code, message, details)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(AccountServiceException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(AccountServiceException):
    """Raised when a requested resource does not exist (or is soft-deleted)."""

    def __init__(self, resource: str, resource_id: Any) -> None:
        """Initialize with resource type and identifier.

        Args:
            resource: Resource type (e.g. 'user').
            resource_id: Identifier that was not found.
        """
        super().__init__(
            f"{resource.capitalize()} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource": resource, "resource_id": str(resource_id)},
        )


class UserAlreadyExistsException(AccountServiceException):
    """Raised when creating a user whose username or email is already registered."""

    def __init__(self, field: str = "username") -> None:
        """Initialize with the conflicting field.

        Args:
            field: 'username' or 'email'.
        """
        super().__init__(
            f"{field.capitalize()} already exists",
            "USER_ALREADY_EXISTS",
            {"field": field},
        )


class DuplicateEmailException(AccountServiceException):
    """Raised when updating a user to an email already used by another user."""

    def __init__(self) -> None:
        super().__init__(
            "Email is already used by another user",
            "DUPLICATE_EMAIL",
            {"field": "email"},
        )


class InvalidCredentialsException(AccountServiceException):
    """Raised when login fails. Same message for unknown user and wrong password."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password", "INVALID_CREDENTIALS")


class UserDisabledException(AccountServiceException):
    """Raised when a disabled user attempts to log in."""

    def __init__(self) -> None:
        super().__init__("User is disabled", "USER_DISABLED")


class AuthenticationException(AccountServiceException):
    """Raised when a bearer credential is absent or fails validation.

    Subclasses name the specific reason. The presentation layer answers
    every subclass with the same unauthorized response; the reason is
    logged only.
    """

    reason = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, self.reason)


class MissingCredentialException(AuthenticationException):
    """No Authorization header on a protected request."""

    reason = "MISSING_CREDENTIAL"

    def __init__(self) -> None:
        super().__init__("Missing bearer credential")


class MalformedCredentialException(AuthenticationException):
    """Authorization header is not in the form 'Bearer <token>'."""

    reason = "MALFORMED_CREDENTIAL"

    def __init__(self) -> None:
        super().__init__("Authorization header must be 'Bearer <token>'")


class MalformedTokenException(AuthenticationException):
    """Token cannot be decoded or lacks required claims."""

    reason = "MALFORMED_TOKEN"

    def __init__(self, message: str = "Token is malformed") -> None:
        super().__init__(message)


class InvalidSignatureException(AuthenticationException):
    """Token signature does not verify against the current secret."""

    reason = "INVALID_SIGNATURE"

    def __init__(self) -> None:
        super().__init__("Token signature is invalid")


class AlgorithmMismatchException(AuthenticationException):
    """Token header names an algorithm outside the expected HMAC family."""

    reason = "ALGORITHM_MISMATCH"

    def __init__(self, algorithm: str | None) -> None:
        super().__init__(f"Unexpected signing algorithm: {algorithm!r}")
        self.details = {"algorithm": algorithm}


class TokenExpiredException(AuthenticationException):
    """Current time is past the token's expires_at."""

    reason = "TOKEN_EXPIRED"

    def __init__(self) -> None:
        super().__init__("Token has expired")


class TokenNotYetValidException(AuthenticationException):
    """Current time is before the token's not_before."""

    reason = "TOKEN_NOT_YET_VALID"

    def __init__(self) -> None:
        super().__init__("Token is not yet valid")


class TooEarlyToRefreshException(AccountServiceException):
    """Raised when refresh is requested while the token has more than the refresh window left."""

    def __init__(self, remaining_seconds: int, window_seconds: int) -> None:
        super().__init__(
            "Token is not yet eligible for refresh",
            "TOO_EARLY_TO_REFRESH",
            {
                "remaining_seconds": remaining_seconds,
                "refresh_window_seconds": window_seconds,
            },
        )


class SqlNotConfiguredException(AccountServiceException):
    """Raised when the SQL store is used but DATABASE_URL is not configured."""

    def __init__(self) -> None:
        super().__init__(
            "SQL database not configured: set DATABASE_BACKEND=sql and DATABASE_URL",
            "SQL_NOT_CONFIGURED",
        )
