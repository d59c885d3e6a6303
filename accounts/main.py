"""FastAPI application entry point.

Wiring only: collaborators, lifespan, exception handlers, middleware,
routers. No business logic here. See accounts.core.lifespan and
accounts.core.exception_handlers.

Settings are resolved inside create_app() so that tests can set env (and
clear the get_settings cache) or pass Settings directly.
"""

from collections.abc import Callable

from fastapi import FastAPI

from accounts.api.v1 import api_router
from accounts.api.v1.endpoints import health
from accounts.application.interfaces.repositories import IUserRepository
from accounts.core.config import Settings, get_settings
from accounts.core.exception_handlers import register_exception_handlers
from accounts.core.failure_governor import FailureCounter, FailureGovernor
from accounts.core.lifespan import create_lifespan
from accounts.infrastructure.cache.cache_protocol import CacheProtocol
from accounts.infrastructure.cache.redis_cache import CacheService
from accounts.infrastructure.persistence.database import get_session_factory
from accounts.infrastructure.persistence.repositories import (
    InMemoryUserRepository,
    SqlUserRepository,
)
from accounts.infrastructure.security.jwt import CredentialIssuer
from accounts.middleware import (
    CORSMiddleware,
    FailureBoundaryMiddleware,
    RequestLogMiddleware,
    TimeoutMiddleware,
    TraceIdMiddleware,
)
from accounts.shared.telemetry.logging import setup_logging


def _build_repository(settings: Settings) -> IUserRepository:
    if settings.database_backend == "sql":
        return SqlUserRepository(get_session_factory(settings))
    return InMemoryUserRepository()


def create_app(
    settings: Settings | None = None,
    *,
    cache: CacheProtocol | None = None,
    user_repository: IUserRepository | None = None,
    terminate: Callable[[int], None] | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        settings: Defaults to get_settings().
        cache: Injected cache; when omitted a Redis CacheService is created
            (and connected at startup) if redis_enabled.
        user_repository: Injected store; defaults per database_backend.
        terminate: Process exit hook for the failure governor (tests pass a fake).
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.settings = settings
    app.state.issuer = CredentialIssuer.from_settings(settings)
    counter = FailureCounter(settings.failure_threshold)
    app.state.governor = (
        FailureGovernor(counter, terminate)
        if terminate is not None
        else FailureGovernor(counter)
    )
    app.state.user_repository = (
        user_repository if user_repository is not None else _build_repository(settings)
    )
    app.state.owns_cache = cache is None and settings.redis_enabled
    if cache is not None:
        app.state.cache = cache
    elif settings.redis_enabled:
        app.state.cache = CacheService(settings)
    else:
        app.state.cache = None

    register_exception_handlers(app)

    # Middleware: last added = outermost. Order (outer to inner): CORS ->
    # trace id -> request log -> timeout -> failure boundary.
    app.add_middleware(
        FailureBoundaryMiddleware, governor=app.state.governor, debug=settings.debug
    )
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(TraceIdMiddleware, header_name=settings.trace_id_header)
    app.add_middleware(
        CORSMiddleware,
        allow_origin=settings.cors_allow_origin,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        expose_headers=settings.cors_expose_headers,
        allow_credentials=settings.cors_allow_credentials,
    )

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(health.router, tags=["health"])

    return app
