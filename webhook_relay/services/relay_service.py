"""Relay service orchestrating destination lookup, rate limiting and forwarding.

This service is the core business logic behind every route. It handles:
- Resolving a destination name against the static mapping
- Consulting the per-destination rate limiter
- Building the outbound message from the inbound payload
- Forwarding and checking the destination's verdict
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping

from webhook_relay.adapters.messaging.base import AbstractMessageForwarder
from webhook_relay.adapters.rate_limit.base import AbstractRateLimiter
from webhook_relay.core.errors import (
    DestinationRejectedAppError,
    NotFoundAppError,
    RateLimitAppError,
)
from webhook_relay.schemas.messages import OutboundMessage
from webhook_relay.services.message_builder import build_alert_message

logger = logging.getLogger(__name__)

MessageBuilder = Callable[[Any], OutboundMessage]


@dataclass(frozen=True)
class Destination:
    """A named webhook endpoint that receives forwarded messages."""

    name: str
    url: str


class RelayService:
    """Service relaying inbound payloads to configured destinations.

    Attributes:
        destinations: Read-only mapping of destination name to Destination.
        rate_limiter: Per-destination admission control.
        forwarder: Client performing the outbound POST.
        default_destination: Name used when a route omits the destination.
        alert_timezone: Time zone used to stamp relayed alerts.
    """

    def __init__(
        self,
        *,
        destinations: Mapping[str, str],
        rate_limiter: AbstractRateLimiter,
        forwarder: AbstractMessageForwarder,
        default_destination: str = "default",
        alert_timezone: str = "Asia/Shanghai",
    ) -> None:
        self.destinations = {
            name: Destination(name=name, url=url) for name, url in destinations.items()
        }
        self.rate_limiter = rate_limiter
        self.forwarder = forwarder
        self.default_destination = default_destination
        self.alert_timezone = alert_timezone

    def resolve(self, name: str | None) -> Destination:
        """Look up a destination by name, falling back to the default one.

        Raises:
            NotFoundAppError: If no destination is configured under that name.
        """
        name = name or self.default_destination
        destination = self.destinations.get(name)
        if destination is None:
            logger.info("relay.destination_not_found", extra={"destination": name})
            raise NotFoundAppError(
                code="destination_not_found",
                message="Webhook not found",
                details={"destination": name},
            )
        return destination

    def admit(self, destination: Destination) -> None:
        """Consume one unit of the destination's rate budget.

        Raises:
            RateLimitAppError: If the destination's window is exhausted.
        """
        result = self.rate_limiter.consume(destination.name)
        if result.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "destination": destination.name,
                    "limit": result.limit,
                    "remaining": result.remaining,
                },
            )
            return

        logger.warning(
            "rate_limit.exceeded",
            extra={
                "destination": destination.name,
                "limit": result.limit,
                "retry_after_s": result.retry_after_seconds,
            },
        )
        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message="Rate limit exceeded. Please try again later.",
            details={
                "destination": destination.name,
                "limit": result.limit,
                "retry_after": result.retry_after_seconds or 0,
            },
        )

    async def deliver(self, destination: Destination, message: OutboundMessage) -> Any:
        """Forward a message and require the destination to accept it.

        Returns:
            The destination's response when ``errcode`` is 0.

        Raises:
            DestinationRejectedAppError: If ``errcode`` is missing or non-zero
                (a boolean ``false`` is not accepted as zero).
            TransportAppError: If the destination cannot be reached.
            MalformedResponseAppError: If the reply is not JSON.
        """
        result = await self.forwarder.send(destination.url, message)

        errcode = result.get("errcode") if isinstance(result, dict) else None
        if isinstance(errcode, bool) or errcode != 0:
            logger.error(
                "relay.destination_rejected",
                extra={"destination": destination.name, "errcode": errcode},
            )
            raise DestinationRejectedAppError(
                code="destination_rejected",
                message="Destination rejected the message",
                details={"destination": destination.name, "response": result},
            )

        logger.info(
            "relay.sent",
            extra={"destination": destination.name, "msgtype": message.msgtype},
        )
        return result

    async def send(self, name: str | None, payload: Any, build: MessageBuilder) -> Any:
        """Relay an inbound payload to a named destination.

        Checks run in a fixed order: destination lookup, rate limit, payload
        validation. An attempt rejected for an invalid payload still counts
        against the destination's window.

        Args:
            name: Destination name, or None for the default destination.
            payload: Decoded request body.
            build: Builder producing the outbound message from the payload.

        Returns:
            The destination's response.
        """
        destination = self.resolve(name)
        self.admit(destination)
        message = build(payload)
        return await self.deliver(destination, message)

    async def forward_alert(self, payload: Any, *, now: datetime | None = None) -> Any:
        """Relay a monitoring alert to the default destination.

        Unlike ``send`` the destination's ``errcode`` is not interpreted; its
        response is returned as-is.
        """
        destination = self.resolve(self.default_destination)
        self.admit(destination)
        message = build_alert_message(payload, now=now, timezone=self.alert_timezone)
        result = await self.forwarder.send(destination.url, message)
        logger.info(
            "relay.alert_forwarded",
            extra={"destination": destination.name, "wechat_result": result},
        )
        return result
