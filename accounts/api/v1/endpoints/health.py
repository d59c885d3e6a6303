"""Health check endpoints. No authentication; used for liveness probes."""

from fastapi import APIRouter, Request

from accounts.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok status plus whether the cache is reachable."""
    settings = request.app.state.settings
    cache = request.app.state.cache
    if cache is None:
        cache_status = "disabled"
    else:
        cache_status = "ok" if cache.is_available() else "unavailable"
    return HealthResponse(
        service=settings.app_name, version=settings.app_version, cache=cache_status
    )


@router.get("/ping")
def ping() -> dict:
    """Plain reachability check."""
    return {"message": "pong"}
