from __future__ import annotations

from webhook_relay.api.routes.alerts import router as alerts_router
from webhook_relay.api.routes.health import router as health_router
from webhook_relay.api.routes.send import router as send_router

__all__ = ["alerts_router", "health_router", "send_router"]
