"""Tests for domain exceptions (error_code, message, details)."""

import pytest

from accounts.domain.exceptions import (
    AccountServiceException,
    AlgorithmMismatchException,
    AuthenticationException,
    DuplicateEmailException,
    InvalidSignatureException,
    MalformedCredentialException,
    MalformedTokenException,
    MissingCredentialException,
    ResourceNotFoundException,
    TokenExpiredException,
    TokenNotYetValidException,
    TooEarlyToRefreshException,
    UserAlreadyExistsException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base exception uses class name as error_code when not provided."""
    exc = AccountServiceException("Something failed")
    assert exc.error_code == "AccountServiceException"
    assert exc.details == {}
    assert exc.to_dict() == {
        "error": "AccountServiceException",
        "message": "Something failed",
        "details": {},
    }


def test_validation_exception_with_field() -> None:
    exc = ValidationException("Invalid format", field="email")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "email"}


def test_resource_not_found() -> None:
    exc = ResourceNotFoundException("user", 42)
    assert exc.message == "User not found: 42"
    assert exc.details == {"resource": "user", "resource_id": "42"}


def test_user_already_exists_names_field() -> None:
    assert UserAlreadyExistsException("email").details == {"field": "email"}
    assert DuplicateEmailException().error_code == "DUPLICATE_EMAIL"


@pytest.mark.parametrize(
    ("exc", "reason"),
    [
        (MissingCredentialException(), "MISSING_CREDENTIAL"),
        (MalformedCredentialException(), "MALFORMED_CREDENTIAL"),
        (MalformedTokenException(), "MALFORMED_TOKEN"),
        (InvalidSignatureException(), "INVALID_SIGNATURE"),
        (AlgorithmMismatchException("none"), "ALGORITHM_MISMATCH"),
        (TokenExpiredException(), "TOKEN_EXPIRED"),
        (TokenNotYetValidException(), "TOKEN_NOT_YET_VALID"),
    ],
)
def test_credential_failures_share_base(exc: AuthenticationException, reason: str) -> None:
    assert isinstance(exc, AuthenticationException)
    assert exc.error_code == reason


def test_too_early_to_refresh_is_not_an_authentication_failure() -> None:
    exc = TooEarlyToRefreshException(3000, 1800)
    assert not isinstance(exc, AuthenticationException)
    assert exc.details == {"remaining_seconds": 3000, "refresh_window_seconds": 1800}
