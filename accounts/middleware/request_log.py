"""Request logging middleware: one line on entry, one on exit. Raw ASGI."""

import logging
import time
from typing import Callable

from accounts.shared.context import get_current_identity

logger = logging.getLogger(__name__)


def _client(scope: dict) -> str:
    client = scope.get("client")
    if not client:
        return "-"
    return f"{client[0]}:{client[1]}"


def RequestLogMiddleware(app: Callable) -> Callable:
    """Log method, path, query and client on entry.

    On exit, log status, duration and the authenticated user id (or "-").
    """

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        method = scope.get("method", "")
        path = scope.get("path", "")
        query = scope.get("query_string", b"").decode("latin-1")
        logger.info(
            "Request started: %s %s%s client=%s",
            method,
            path,
            f"?{query}" if query else "",
            _client(scope),
        )
        status_code: int | None = None
        start = time.perf_counter()

        async def send_wrapper(message: dict) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await app(scope, receive, send_wrapper)
        finally:
            identity = get_current_identity()
            logger.info(
                "Request finished: %s %s status=%s duration_ms=%.1f user_id=%s",
                method,
                path,
                status_code if status_code is not None else "-",
                (time.perf_counter() - start) * 1000,
                identity.user_id if identity else "-",
            )

    return asgi_app
