"""CORS middleware.

Adds the configured Access-Control-* headers to every response and answers
preflight (OPTIONS) requests with 204 without calling the rest of the chain.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

from typing import Callable


def CORSMiddleware(
    app: Callable,
    allow_origin: str = "*",
    allow_methods: str = "GET, POST, PUT, DELETE, OPTIONS",
    allow_headers: str = "Content-Type, Authorization, X-Trace-ID",
    expose_headers: str = "Content-Length, X-Trace-ID",
    allow_credentials: bool = True,
) -> Callable:
    """Always-on CORS headers; OPTIONS short-circuits with 204. Raw ASGI."""
    cors_headers = [
        (b"access-control-allow-origin", allow_origin.encode()),
        (b"access-control-allow-methods", allow_methods.encode()),
        (b"access-control-allow-headers", allow_headers.encode()),
        (b"access-control-expose-headers", expose_headers.encode()),
    ]
    if allow_credentials:
        cors_headers.append((b"access-control-allow-credentials", b"true"))

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        if scope.get("method") == "OPTIONS":
            await send({
                "type": "http.response.start",
                "status": 204,
                "headers": list(cors_headers),
            })
            await send({"type": "http.response.body", "body": b"", "more_body": False})
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = [
                    (k, v)
                    for k, v in message.get("headers", [])
                    if not k.lower().startswith(b"access-control-")
                ]
                headers.extend(cors_headers)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
