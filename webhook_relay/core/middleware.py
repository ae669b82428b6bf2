"""HTTP middleware for request ID propagation and correlation.

The middleware:
- Accepts the incoming correlation header or generates a UUID
- Stores request_id in contextvars so relay logs carry it
- Injects request_id and total duration into response headers
- Clears context after request completion to prevent context leaks

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from webhook_relay.core.exception_handlers import general_exception_handler, settings_for
from webhook_relay.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Tag each request/response pair with a correlation id and duration.

    If the caller provides the configured header (``X-Request-ID`` by default)
    its value is reused, otherwise a new UUID is generated. Unexpected errors
    are turned into the generic 500 envelope here, while the id is still set.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with the correlation header and
            ``X-Request-Duration-ms`` added.
    """

    header_name = settings_for(request).log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            response = await general_exception_handler(request, exc)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "http.request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
