"""Rate limiter construction and lookup for the HTTP layer.

Design goals:
- Explicit ownership: the application factory builds one limiter and stores it
  on ``app.state``; nothing lives in a module-level singleton.
- Swap-friendly: routes and services depend on AbstractRateLimiter only.
- Testable: tests build their own limiter (with a fake clock) and pass it to
  ``create_app``.
"""

from __future__ import annotations

import logging

from webhook_relay.adapters.rate_limit.base import AbstractRateLimiter
from webhook_relay.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from webhook_relay.core.config import RelaySettings

logger = logging.getLogger(__name__)


def create_rate_limiter(relay_settings: RelaySettings) -> AbstractRateLimiter:
    """Build the per-destination limiter from configuration."""

    logger.debug(
        "rate_limit.configured",
        extra={
            "limit": relay_settings.rate_limit_max,
            "window_s": relay_settings.rate_limit_window_seconds,
        },
    )
    return InMemorySlidingWindowRateLimiter(
        limit=relay_settings.rate_limit_max,
        window_seconds=relay_settings.rate_limit_window_seconds,
    )
