"""Global exception handlers for consistent error responses.

Design:
- AppError subclasses → mapped HTTP status (400, 404, 429, 500)
- DestinationRejectedAppError → 400 with the destination's body verbatim
- Unexpected Exception → generic 500 (safety net)
- Error envelopes include request_id for log correlation

The root route never reaches these handlers: it converts every failure into a
200 response itself.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from webhook_relay.core.config import Settings, settings
from webhook_relay.core.errors import (
    AppError,
    DestinationRejectedAppError,
    MalformedResponseAppError,
    NotFoundAppError,
    RateLimitAppError,
    TransportAppError,
    ValidationAppError,
)
from webhook_relay.core.logging import get_request_id

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins.
_STATUS_BY_ERROR: tuple[tuple[type[AppError], int], ...] = (
    (ValidationAppError, 400),
    (NotFoundAppError, 404),
    (RateLimitAppError, 429),
    (DestinationRejectedAppError, 400),
    (TransportAppError, 500),
    (MalformedResponseAppError, 500),
)


def status_for(exc: AppError) -> int:
    """Return the HTTP status code for a domain error (500 when unmapped)."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def settings_for(request: Request) -> Settings:
    """Settings the app was built with (the global ones for bare apps)."""
    return getattr(request.app.state, "settings", settings)


def _rate_limit_headers(request: Request, exc: RateLimitAppError) -> dict[str, str]:
    if not settings_for(request).relay.rate_limit_include_headers or not exc.details:
        return {}
    return {
        "Retry-After": str(exc.details.get("retry_after", 0)),
        "X-RateLimit-Limit": str(exc.details.get("limit", "")),
        "X-RateLimit-Remaining": "0",
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors.

    All error envelopes include:
    - error.code: Machine-readable error code
    - error.message: Human-readable message
    - error.request_id: For log correlation
    - error.details: Optional structured context

    A destination rejection is answered with the destination's own body so
    callers see its ``errcode``/``errmsg`` unchanged.
    """
    status_code = status_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "request_path": request.url.path,
        },
    )

    if isinstance(exc, DestinationRejectedAppError) and exc.details:
        return JSONResponse(status_code=status_code, content=exc.details.get("response"))

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        error_content["details"] = exc.details

    headers = _rate_limit_headers(request, exc) if isinstance(exc, RateLimitAppError) else None

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
        headers=headers or None,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information while returning a generic message; no stack
    traces reach the client.

    The request middleware calls this directly so the envelope still carries
    the request id; Starlette only falls back to it for errors raised
    outside that middleware.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "Internal server error",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
