"""Failure boundary middleware.

Runs the rest of the chain through FailureGovernor.guard so an unexpected
exception becomes a 500 envelope instead of a dropped connection, and is
counted toward process termination. Once the governor has escalated,
every further request is refused with 503.
"""

import logging
from typing import Callable

from accounts.core.failure_governor import FailureGovernor, UnexpectedFailure
from accounts.middleware.asgi import send_json
from accounts.shared.telemetry.tracing import set_span_error

logger = logging.getLogger(__name__)


def FailureBoundaryMiddleware(
    app: Callable, governor: FailureGovernor, debug: bool = False
) -> Callable:
    """Recover unexpected exceptions into a 500 response. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        if governor.terminated:
            await send_json(send, 503, {"code": 503, "message": "Service unavailable"})
            return
        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        outcome = await governor.guard(
            lambda: app(scope, receive, send_wrapper),
            method=scope.get("method", ""),
            path=scope.get("path", ""),
        )
        if not isinstance(outcome, UnexpectedFailure):
            return
        set_span_error(outcome.error)
        if response_started:
            logger.warning("Response already started; cannot send failure envelope")
            return
        content = {"code": 500, "message": "Internal server error"}
        if debug:
            content["error"] = str(outcome.error)
        await send_json(send, 500, content)

    return asgi_app
