"""Application factory for the FastAPI app.

Centralizes app construction (logging, middleware, handlers, routers and the
relay service) so tests can build isolated instances with their own rate
limiter and forwarder.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from webhook_relay.adapters.messaging.base import AbstractMessageForwarder
from webhook_relay.adapters.messaging.factory import create_forwarder
from webhook_relay.adapters.rate_limit.base import AbstractRateLimiter
from webhook_relay.api.routes import alerts_router, health_router, send_router
from webhook_relay.core.config import Settings, settings as default_settings
from webhook_relay.core.exception_handlers import setup_exception_handlers
from webhook_relay.core.logging import configure_logging
from webhook_relay.core.middleware import request_id_middleware
from webhook_relay.core.rate_limit import create_rate_limiter
from webhook_relay.services.relay_service import RelayService

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    rate_limiter: AbstractRateLimiter | None = None,
    forwarder: AbstractMessageForwarder | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to use; defaults to the global settings.
        rate_limiter: Limiter to use instead of the configured in-memory one.
        forwarder: Forwarder to use instead of the WeCom HTTP client.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and service.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    app = FastAPI(
        title="Webhook Relay",
        description=(
            "Relays inbound webhook calls to WeCom group robots as text or "
            "markdown messages, with a per-destination sliding-window rate limit."
        ),
        version="0.1.0",
    )
    app.state.settings = cfg

    app.state.relay_service = RelayService(
        destinations=cfg.relay.destinations,
        rate_limiter=rate_limiter or create_rate_limiter(cfg.relay),
        forwarder=forwarder or create_forwarder(cfg.relay),
        default_destination=cfg.relay.default_destination,
        alert_timezone=cfg.relay.alert_timezone,
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(send_router)
    app.include_router(alerts_router)
    app.include_router(health_router)

    logger.info(
        "app.created",
        extra={
            "app_env": cfg.app_env,
            "destinations": sorted(cfg.relay.destinations),
            "rate_limit_max": cfg.relay.rate_limit_max,
            "rate_limit_window_s": cfg.relay.rate_limit_window_seconds,
        },
    )
    return app
