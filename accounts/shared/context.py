"""Request context management using contextvars.

Provides async-safe storage for request-scoped data: the trace id
assigned by TraceIdMiddleware and the identity attached by the
authentication gate. Log records pick the trace id up through
TraceContextFilter.

Usage:
    with request_context(trace_id):
        ...
        set_current_identity(user_id=1, username="alice")
        get_current_trace_id()
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

_current_trace_id: ContextVar[str | None] = ContextVar("current_trace_id", default=None)
_current_user_id: ContextVar[int | None] = ContextVar("current_user_id", default=None)
_current_username: ContextVar[str | None] = ContextVar(
    "current_username", default=None
)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as carried by a validated credential."""

    user_id: int
    username: str


@contextmanager
def request_context(trace_id: str) -> Iterator[None]:
    """Bind trace_id for the duration of one request and reset afterwards.

    Identity set inside the block is reset as well, so nothing leaks into
    the next request handled by the same task.
    """
    trace_token = _current_trace_id.set(trace_id)
    user_token = _current_user_id.set(None)
    name_token = _current_username.set(None)
    try:
        yield
    finally:
        _current_username.reset(name_token)
        _current_user_id.reset(user_token)
        _current_trace_id.reset(trace_token)


def get_current_trace_id() -> str | None:
    """Return the trace id of the request being handled, or None."""
    return _current_trace_id.get()


def set_current_identity(user_id: int, username: str) -> None:
    """Record the authenticated identity for this request.

    Raises:
        ValueError: If user_id is not positive.
    """
    if user_id <= 0:
        raise ValueError("user_id must be positive")
    _current_user_id.set(user_id)
    _current_username.set(username)


def get_current_identity() -> Identity | None:
    """Return the authenticated identity, or None on unauthenticated paths."""
    user_id = _current_user_id.get()
    if user_id is None:
        return None
    return Identity(user_id=user_id, username=_current_username.get() or "")
