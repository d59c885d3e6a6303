"""Uniform response envelope."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Success envelope: code 0, a message and the payload."""

    code: int = 0
    message: str = "success"
    data: T | None = None


class ErrorEnvelope(BaseModel):
    """Failure envelope: HTTP status as code; error and details when available."""

    code: int
    message: str
    error: str | None = None
    details: dict | list | None = None
