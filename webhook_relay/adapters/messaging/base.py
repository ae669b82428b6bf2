from abc import ABC, abstractmethod
from typing import Any

from webhook_relay.schemas.messages import OutboundMessage


class AbstractMessageForwarder(ABC):
	"""Interface for clients that deliver one message to a destination URL."""

	@abstractmethod
	async def send(self, destination_url: str, message: OutboundMessage) -> Any:
		"""POST the message to the destination and return its parsed JSON reply.

		Args:
			destination_url: Webhook URL of the destination.
			message: Text or markdown message to deliver.

		Returns:
			Any: The destination's JSON response, verbatim.

		Raises:
			TransportAppError: If the destination cannot be reached.
			MalformedResponseAppError: If the reply body is not valid JSON.
		"""
		...
