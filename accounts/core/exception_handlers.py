"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to the failure envelope {"code": <status>, "message": ...}.
Unexpected exceptions are not handled here; they reach the failure
boundary middleware and the failure governor.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from accounts.domain.exceptions import AccountServiceException, AuthenticationException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status; unknown codes fall back to 400.
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "RESOURCE_NOT_FOUND": 404,
    "USER_ALREADY_EXISTS": 409,
    "DUPLICATE_EMAIL": 409,
    "INVALID_CREDENTIALS": 401,
    "USER_DISABLED": 403,
    "TOO_EARLY_TO_REFRESH": 400,
    "SQL_NOT_CONFIGURED": 503,
}

UNAUTHORIZED_BODY = {"code": 401, "message": "Unauthorized"}


def error_body(status: int, message: str, **extra: Any) -> dict[str, Any]:
    """Failure envelope; extra keys (error, details) only when present."""
    body: dict[str, Any] = {"code": status, "message": message}
    body.update({k: v for k, v in extra.items() if v})
    return body


def _authentication_exception_handler(
    request: Request, exc: AuthenticationException
) -> JSONResponse:
    """Uniform 401; the specific reason is logged, never returned."""
    logger.info(
        "Rejected credential on %s %s: %s",
        request.method,
        request.url.path,
        exc.error_code,
    )
    return JSONResponse(
        status_code=401,
        content=UNAUTHORIZED_BODY,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _account_exception_handler(
    request: Request, exc: AccountServiceException
) -> JSONResponse:
    """Return the failure envelope with a status derived from error_code."""
    status = _ERROR_CODE_STATUS.get(exc.error_code, 400)
    return JSONResponse(
        status_code=status,
        content=error_body(status, exc.message, error=exc.error_code, details=exc.details),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with validation error details."""
    return JSONResponse(
        status_code=400,
        content=error_body(
            400,
            "Request validation failed",
            error="VALIDATION_ERROR",
            details=jsonable_encoder(exc.errors()),
        ),
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return the envelope for Starlette HTTP exceptions (404 route, 405 method)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    AuthenticationException is registered before its base so the most
    specific handler wins.
    """
    app.add_exception_handler(AuthenticationException, _authentication_exception_handler)
    app.add_exception_handler(AccountServiceException, _account_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
