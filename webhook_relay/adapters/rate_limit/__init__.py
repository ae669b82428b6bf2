"""Rate limiting adapters.

This package provides a small abstraction layer so the relay can start with an
in-memory limiter and later migrate to Redis or another shared store without
changing the service layer.
"""

from webhook_relay.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from webhook_relay.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemorySlidingWindowRateLimiter",
    "RateLimitResult",
]
