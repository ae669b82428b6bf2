"""Factory for creating the message forwarder."""

from webhook_relay.adapters.messaging.base import AbstractMessageForwarder
from webhook_relay.adapters.messaging.wecom_client import WeComWebhookClient
from webhook_relay.core.config import RelaySettings


def create_forwarder(relay_settings: RelaySettings) -> AbstractMessageForwarder:
    """Instantiate the forwarder configured for this deployment.

    Args:
        relay_settings: Relay section of the application settings.

    Returns:
        AbstractMessageForwarder: Client used for every outbound send.
    """
    return WeComWebhookClient(timeout_seconds=relay_settings.forward_timeout_seconds)
