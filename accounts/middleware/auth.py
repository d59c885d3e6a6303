"""Authentication gate for protected routes.

A FastAPI dependency rather than a global middleware: it is attached to the
protected router only, runs after the rest of the chain and before the
handler, and raises an AuthenticationException subclass on any credential
problem. The exception handler turns all of them into the same 401.
"""

import logging

from fastapi import Request

from accounts.domain.exceptions import (
    MalformedCredentialException,
    MissingCredentialException,
)
from accounts.infrastructure.security.jwt import CredentialIssuer
from accounts.shared.context import Identity, set_current_identity

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an 'Authorization: Bearer <token>' value.

    The scheme is case-sensitive and separated from the token by a single
    space.

    Raises:
        MissingCredentialException: Header absent or empty.
        MalformedCredentialException: Not exactly 'Bearer <token>'.
    """
    if authorization is None or not authorization.strip():
        raise MissingCredentialException()
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or token.split() != [token]:
        raise MalformedCredentialException()
    return token


class AuthenticationGate:
    """Dependency that validates the bearer credential and binds the identity.

    The identity is returned to the handler and recorded in the request
    context, where the request log picks it up.
    """

    async def __call__(self, request: Request) -> Identity:
        token = extract_bearer_token(request.headers.get("Authorization"))
        issuer: CredentialIssuer = request.app.state.issuer
        claims = issuer.validate(token)
        identity = Identity(user_id=claims.subject_id, username=claims.subject_name)
        request.state.token = token
        set_current_identity(identity.user_id, identity.username)
        logger.debug("Authenticated user_id=%s", identity.user_id)
        return identity


require_authentication = AuthenticationGate()
