"""Trace ID middleware.

Forwards a client-supplied X-Trace-ID or generates one, binds it to the
logging context for the whole request, echoes it on the response and
logs the request outcome once the chain returns. Client-provided values
are sanitized (length + character set) to prevent log injection.
"""

import logging
import re
import time
import uuid
from typing import Callable

from accounts.middleware.asgi import get_header
from accounts.shared.context import request_context
from accounts.shared.telemetry.tracing import add_span_attributes

logger = logging.getLogger(__name__)

# Safe for logging: alphanumeric, hyphen, underscore; max length to avoid abuse.
TRACE_ID_MAX_LENGTH = 64
TRACE_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(TRACE_ID_MAX_LENGTH) + r"}$"
)


def sanitize_trace_id(raw: str | None) -> str:
    """Return raw if valid and safe; otherwise return a new UUID."""
    if raw is None:
        return str(uuid.uuid4())
    candidate = raw.strip()
    if not TRACE_ID_ALLOWED_PATTERN.match(candidate):
        return str(uuid.uuid4())
    return candidate


def TraceIdMiddleware(app: Callable, header_name: str = "X-Trace-ID") -> Callable:
    """Propagate X-Trace-ID through logs, span and response. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        trace_id = sanitize_trace_id(get_header(scope, header_name))
        scope.setdefault("state", {})["trace_id"] = trace_id
        status_code = 500
        start = time.perf_counter()

        async def send_wrapper(message: dict) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((header_name.encode(), trace_id.encode()))
                message["headers"] = headers
            await send(message)

        with request_context(trace_id):
            add_span_attributes(**{"http.trace_id": trace_id})
            try:
                await app(scope, receive, send_wrapper)
            finally:
                logger.info(
                    "%s %s -> %s (%.1fms)",
                    scope.get("method", ""),
                    scope.get("path", ""),
                    status_code,
                    (time.perf_counter() - start) * 1000,
                )

    return asgi_app
