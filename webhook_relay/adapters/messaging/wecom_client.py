"""WeCom group-robot webhook client adapter."""

import json
import logging
from typing import Any

import httpx

from webhook_relay.adapters.messaging.base import AbstractMessageForwarder
from webhook_relay.core.errors import MalformedResponseAppError, TransportAppError
from webhook_relay.schemas.messages import OutboundMessage, to_wire

logger = logging.getLogger(__name__)

# Keep diagnostics bounded when a destination answers with an HTML error page.
_RAW_BODY_PREVIEW_CHARS = 2000


class WeComWebhookClient(AbstractMessageForwarder):
    """Client posting messages to WeCom robot webhooks and returning JSON.

    A fresh ``httpx.AsyncClient`` is opened per send; there is no retry.
    """

    def __init__(
        self,
        timeout_seconds: float | None = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            timeout_seconds: Timeout for the whole exchange; None disables it.
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def send(self, destination_url: str, message: OutboundMessage) -> Any:
        """Serialize and POST the message, then parse the reply as JSON.

        Args:
            destination_url: Webhook URL of the destination.
            message: Text or markdown message to deliver.

        Returns:
            Any: Parsed JSON response from the destination.

        Raises:
            TransportAppError: If the connection fails or is interrupted.
            MalformedResponseAppError: If the response is not valid JSON.
        """
        body = json.dumps(to_wire(message), ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(destination_url, content=body, headers=headers)
                raw = await response.aread()
        except httpx.TransportError as exc:
            logger.warning(
                "forward.transport_failed",
                extra={"error_type": type(exc).__name__, "msgtype": message.msgtype},
            )
            raise TransportAppError(
                code="destination_unreachable",
                message=f"Could not reach destination: {exc}",
                details={"error_type": type(exc).__name__},
            ) from exc

        text = raw.decode("utf-8", errors="replace")
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.warning(
                "forward.malformed_response",
                extra={"http_status": response.status_code, "body_chars": len(text)},
            )
            raise MalformedResponseAppError(
                code="destination_malformed_response",
                message=f"Invalid response from destination: {text[:_RAW_BODY_PREVIEW_CHARS]}",
                details={
                    "http_status": response.status_code,
                    "raw_body": text[:_RAW_BODY_PREVIEW_CHARS],
                },
            ) from exc

        logger.debug(
            "forward.completed",
            extra={"http_status": response.status_code, "msgtype": message.msgtype},
        )
        return parsed
