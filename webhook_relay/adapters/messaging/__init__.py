"""Messaging adapter layer - delivers messages to destination webhooks."""

from webhook_relay.adapters.messaging.base import AbstractMessageForwarder
from webhook_relay.adapters.messaging.factory import create_forwarder
from webhook_relay.adapters.messaging.wecom_client import WeComWebhookClient

__all__ = [
    "AbstractMessageForwarder",
    "WeComWebhookClient",
    "create_forwarder",
]
