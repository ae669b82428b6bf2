"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    hint: str
    destination: str
    limit: int
    retry_after: int
    error_type: str
    raw_body: str
    http_status: int
    response: Any
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when the inbound payload is missing or invalid."""


class NotFoundAppError(AppError):
    """Raised when a destination name is not configured."""


class RateLimitAppError(AppError):
    """Raised when a destination's rate window is exhausted."""


class TransportAppError(AppError):
    """Raised when the destination cannot be reached or the exchange is cut short."""


class MalformedResponseAppError(AppError):
    """Raised when the destination replies with a body that is not JSON."""


class DestinationRejectedAppError(AppError):
    """Raised when the destination replies with a non-zero ``errcode``.

    ``details["response"]`` holds the destination's parsed body verbatim.
    """
