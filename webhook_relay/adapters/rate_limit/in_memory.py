"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: state is lost on restart and running multiple workers
  multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from typing import Callable

from webhook_relay.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting admissions over a trailing window per key.

    Each key keeps the timestamps of its admitted calls. Every check first drops
    timestamps that fell out of the window, then admits only while fewer than
    ``limit`` remain. Rejected attempts are not recorded.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of admissions per window.
            window_seconds: Length of the trailing window in seconds.
            clock: Time source returning seconds as a float.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._calls_by_key: dict[str, deque[float]] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def _prune(self, calls: deque[float], now: float) -> None:
        """Drop timestamps at least one full window older than ``now``."""
        while calls and now - calls[0] >= self._window_seconds:
            calls.popleft()

    def _build_blocked_result(self, *, now: float, oldest: float) -> RateLimitResult:
        """Build a RateLimitResult for a rejected attempt."""
        retry_after = max(0, int(math.ceil(oldest + self._window_seconds - now)))
        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=0,
            retry_after_seconds=retry_after,
        )

    def consume(self, key: str, *, now: float | None = None) -> RateLimitResult:
        """Check the window for ``key`` and record the attempt if admitted.

        Args:
            key: Unique identifier for rate limiting (a destination name).
            now: Timestamp of the attempt; defaults to the configured clock.

        Returns:
            RateLimitResult with allowance decision and metadata.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        if now is None:
            now = self._clock()

        with self._lock:
            calls = self._calls_by_key.setdefault(key, deque())
            self._prune(calls, now)

            if len(calls) >= self._limit:
                return self._build_blocked_result(now=now, oldest=calls[0])

            calls.append(now)
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=self._limit - len(calls),
                retry_after_seconds=None,
            )

    def window_size(self, key: str) -> int:
        """Return how many admissions are currently recorded for ``key``."""
        with self._lock:
            return len(self._calls_by_key.get(key, ()))

    def reset(self) -> None:
        """Forget every recorded admission."""
        with self._lock:
            self._calls_by_key.clear()
