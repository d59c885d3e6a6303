"""Security: bearer credentials and password hashing."""

from accounts.infrastructure.security.jwt import (
    CredentialIssuer,
    IssuedToken,
    TokenClaims,
)
from accounts.infrastructure.security.password import (
    DUMMY_PASSWORD_HASH,
    get_password_hash,
    verify_password,
)

__all__ = [
    "CredentialIssuer",
    "IssuedToken",
    "TokenClaims",
    "DUMMY_PASSWORD_HASH",
    "get_password_hash",
    "verify_password",
]
