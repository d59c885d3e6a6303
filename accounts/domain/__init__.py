"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from accounts.domain.enums import UserStatus
from accounts.domain.exceptions import (
    AccountServiceException,
    AlgorithmMismatchException,
    AuthenticationException,
    DuplicateEmailException,
    InvalidCredentialsException,
    InvalidSignatureException,
    MalformedCredentialException,
    MalformedTokenException,
    MissingCredentialException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    TokenExpiredException,
    TokenNotYetValidException,
    TooEarlyToRefreshException,
    UserAlreadyExistsException,
    UserDisabledException,
    ValidationException,
)

__all__ = [
    "UserStatus",
    "AccountServiceException",
    "AlgorithmMismatchException",
    "AuthenticationException",
    "DuplicateEmailException",
    "InvalidCredentialsException",
    "InvalidSignatureException",
    "MalformedCredentialException",
    "MalformedTokenException",
    "MissingCredentialException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "TokenExpiredException",
    "TokenNotYetValidException",
    "TooEarlyToRefreshException",
    "UserAlreadyExistsException",
    "UserDisabledException",
    "ValidationException",
]
