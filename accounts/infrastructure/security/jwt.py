"""Bearer credential issue, validation and refresh.

Tokens are HMAC-signed JWTs carrying the subject's id and name. Time
bounds are checked against an injectable clock so expiry and the refresh
window can be exercised without sleeping.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, cast

from jose import jwt
from jose.exceptions import JOSEError

from accounts.core.config import HMAC_ALGORITHMS, Settings
from accounts.domain.exceptions import (
    AlgorithmMismatchException,
    InvalidSignatureException,
    MalformedTokenException,
    TokenExpiredException,
    TokenNotYetValidException,
    TooEarlyToRefreshException,
)
from accounts.shared.utils.datetime import from_timestamp_utc, utc_now

logger = logging.getLogger(__name__)

_REQUIRED_INT_CLAIMS = ("user_id", "iat", "nbf", "exp")

# Signature only; time bounds and issuer are checked against our own clock.
_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_aud": False,
    "verify_iat": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "verify_at_hash": False,
}


@dataclass(frozen=True)
class IssuedToken:
    """Signed token and its lifetime in seconds."""

    token: str
    expires_in: int


@dataclass(frozen=True)
class TokenClaims:
    """Identity and validity window carried by a verified token."""

    subject_id: int
    subject_name: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    issuer: str


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CredentialIssuer:
    """Issues, validates and refreshes signed bearer credentials."""

    def __init__(
        self,
        secret_key: str,
        lifetime_seconds: int,
        *,
        algorithm: str = "HS256",
        issuer: str = "account-service",
        refresh_window_seconds: int = 30 * 60,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"algorithm must be an HMAC algorithm, got: {algorithm!r}")
        if lifetime_seconds <= 0:
            raise ValueError("lifetime_seconds must be positive")
        self._secret_key = secret_key
        self.lifetime_seconds = lifetime_seconds
        self.algorithm = algorithm
        self.issuer = issuer
        self.refresh_window_seconds = refresh_window_seconds
        self._clock = clock

    @classmethod
    def from_settings(
        cls, settings: Settings, clock: Callable[[], datetime] = utc_now
    ) -> "CredentialIssuer":
        return cls(
            settings.secret_key.get_secret_value(),
            settings.access_token_expire_seconds,
            algorithm=settings.algorithm,
            issuer=settings.token_issuer,
            refresh_window_seconds=settings.token_refresh_window_seconds,
            clock=clock,
        )

    def _now(self) -> int:
        return int(self._clock().timestamp())

    def issue(self, subject_id: int, subject_name: str) -> IssuedToken:
        """Sign a new token for the subject valid from now for the full lifetime."""
        now = self._now()
        claims = {
            "user_id": subject_id,
            "username": subject_name,
            "sub": str(subject_id),
            "iat": now,
            "nbf": now,
            "exp": now + self.lifetime_seconds,
            "iss": self.issuer,
        }
        token = jwt.encode(claims, self._secret_key, algorithm=self.algorithm)
        return IssuedToken(token=cast(str, token), expires_in=self.lifetime_seconds)

    def validate(self, token: str) -> TokenClaims:
        """Verify token and return its claims.

        Raises:
            MalformedTokenException: Undecodable token, missing claims or wrong issuer.
            AlgorithmMismatchException: Header names an algorithm other than ours.
            InvalidSignatureException: Signature does not verify with the secret.
            TokenExpiredException: now > exp.
            TokenNotYetValidException: now < nbf.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JOSEError as e:
            raise MalformedTokenException(f"Token header is not decodable: {e!s}") from e
        algorithm = header.get("alg")
        if algorithm not in HMAC_ALGORITHMS or algorithm != self.algorithm:
            raise AlgorithmMismatchException(algorithm)

        try:
            jwt.get_unverified_claims(token)
        except JOSEError as e:
            raise MalformedTokenException(f"Token claims are not decodable: {e!s}") from e

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options=_DECODE_OPTIONS,
            )
        except JOSEError as e:
            raise InvalidSignatureException() from e

        for name in _REQUIRED_INT_CLAIMS:
            if not _is_int(payload.get(name)):
                raise MalformedTokenException(f"Token claim {name!r} missing or not an integer")
        if not isinstance(payload.get("username"), str):
            raise MalformedTokenException("Token claim 'username' missing")
        if payload.get("iss") != self.issuer:
            raise MalformedTokenException("Token issuer does not match")

        now = self._now()
        if now > payload["exp"]:
            raise TokenExpiredException()
        if now < payload["nbf"]:
            raise TokenNotYetValidException()

        return TokenClaims(
            subject_id=payload["user_id"],
            subject_name=payload["username"],
            issued_at=from_timestamp_utc(payload["iat"]),
            not_before=from_timestamp_utc(payload["nbf"]),
            expires_at=from_timestamp_utc(payload["exp"]),
            issuer=payload["iss"],
        )

    def refresh(self, token: str) -> IssuedToken:
        """Issue a fresh token when the current one is inside the refresh window.

        A remaining lifetime exactly equal to the window is refreshable.

        Raises:
            TooEarlyToRefreshException: More than the window remains.
            AuthenticationException: Any validation failure of token.
        """
        claims = self.validate(token)
        remaining = int(claims.expires_at.timestamp()) - self._now()
        if remaining > self.refresh_window_seconds:
            raise TooEarlyToRefreshException(remaining, self.refresh_window_seconds)
        logger.info("Refreshing credential for user_id=%s", claims.subject_id)
        return self.issue(claims.subject_id, claims.subject_name)
