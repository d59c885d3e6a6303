"""Request timeout middleware.

Cancels the request if it runs longer than the configured timeout
(asyncio.timeout); cancellation reaches any pending store or cache await.
The app runs in the current task, so context set downstream stays visible
to outer middleware.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

import asyncio
import logging
from typing import Callable

from accounts.middleware.asgi import send_json

logger = logging.getLogger(__name__)


def TimeoutMiddleware(app: Callable, timeout_seconds: float) -> Callable:
    """Cancel request after timeout_seconds (sends 504 on timeout). Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            async with asyncio.timeout(float(timeout_seconds)):
                await app(scope, receive, send_wrapper)
        except TimeoutError:
            logger.warning(
                "Request timed out after %s seconds: %s %s",
                timeout_seconds,
                scope.get("method", ""),
                scope.get("path", ""),
            )
            if response_started:
                return
            await send_json(
                send,
                504,
                {
                    "code": 504,
                    "message": f"Request timed out after {timeout_seconds} seconds",
                },
            )

    return asgi_app
