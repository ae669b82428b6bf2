"""Webhook relay forwarding inbound calls to WeCom group robots."""

__version__ = "0.1.0"
