"""Operator API schemas."""

from pydantic import BaseModel


class FailureCountResponse(BaseModel):
    """Failure governor state for operators."""

    count: int
    threshold: int
