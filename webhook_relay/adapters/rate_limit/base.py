"""Rate limiter interfaces.

The relay service depends on this abstraction (not the concrete implementation)
so tests can inject their own instance and clock, and the storage backend can
be swapped later (e.g., Redis) with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit check/consume operation.

    Attributes:
        allowed: Whether the call attempt is admitted.
        limit: Max admissions per window.
        remaining: Remaining admissions in the current window (0 when blocked).
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, key: str, *, now: float | None = None) -> RateLimitResult:
        """Record one call attempt for a given key if budget allows.

        Args:
            key: Unique identifier (a destination name).
            now: Optional timestamp of the attempt; defaults to the limiter clock.

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    def admit(self, key: str, now: float | None = None) -> bool:
        """Return True when the attempt is admitted (and recorded)."""
        return self.consume(key, now=now).allowed
