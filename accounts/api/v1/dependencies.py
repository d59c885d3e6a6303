"""Presentation-layer dependency injection (composition root).

Collaborators are built once in create_app and stored on app.state; these
dependencies hand them to routes so handlers never construct
infrastructure themselves.
"""

import hmac
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request

from accounts.application.services.user_service import UserService
from accounts.core.config import Settings
from accounts.core.failure_governor import FailureGovernor
from accounts.middleware.auth import require_authentication
from accounts.shared.context import Identity


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_service(request: Request) -> UserService:
    state = request.app.state
    return UserService(state.user_repository, state.cache, state.issuer, state.settings)


def get_governor(request: Request) -> FailureGovernor:
    return request.app.state.governor


def require_ops_secret(
    settings: Annotated[Settings, Depends(get_app_settings)],
    x_ops_secret: Annotated[str | None, Header()] = None,
) -> None:
    """Guard operator endpoints with the shared X-Ops-Secret header.

    Raises:
        HTTPException: 503 when no secret is configured, 403 on mismatch.
    """
    if settings.ops_secret is None or not settings.ops_secret.get_secret_value():
        raise HTTPException(status_code=503, detail="Operator endpoints are disabled")
    expected = settings.ops_secret.get_secret_value().encode()
    if x_ops_secret is None or not hmac.compare_digest(x_ops_secret.encode(), expected):
        raise HTTPException(status_code=403, detail="Forbidden")


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
CurrentIdentity = Annotated[Identity, Depends(require_authentication)]
GovernorDep = Annotated[FailureGovernor, Depends(get_governor)]
