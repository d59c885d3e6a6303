"""Health check schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str = "ok"
    service: str
    version: str
    cache: str = "disabled"
