"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that loads settings so the
tests never pick up a developer's .env file or real webhook URLs.
"""

import json
import os
from typing import Any
from unittest.mock import Mock

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ["RELAY_DESTINATIONS"] = json.dumps(
    {
        "default": "https://relay.test/cgi-bin/webhook/send?key=default-key",
        "ops": "https://relay.test/cgi-bin/webhook/send?key=ops-key",
    }
)
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from webhook_relay.adapters.messaging.base import AbstractMessageForwarder
from webhook_relay.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from webhook_relay.core.app_factory import create_app
from webhook_relay.schemas.messages import OutboundMessage

WECOM_OK = {"errcode": 0, "errmsg": "ok"}


class RecordingForwarder(AbstractMessageForwarder):
    """Forwarder double that records calls instead of hitting the network."""

    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = dict(WECOM_OK) if response is None else response
        self.error = error
        self.calls: list[tuple[str, OutboundMessage]] = []

    async def send(self, destination_url: str, message: OutboundMessage) -> Any:
        self.calls.append((destination_url, message))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def clock() -> Mock:
    return Mock(return_value=1000.0)


@pytest.fixture
def limiter(clock: Mock) -> InMemorySlidingWindowRateLimiter:
    return InMemorySlidingWindowRateLimiter(limit=3, window_seconds=60, clock=clock)


@pytest.fixture
def make_forwarder() -> type[RecordingForwarder]:
    return RecordingForwarder


@pytest.fixture
def forwarder() -> RecordingForwarder:
    return RecordingForwarder()


@pytest.fixture
def app(limiter: InMemorySlidingWindowRateLimiter, forwarder: RecordingForwarder) -> FastAPI:
    return create_app(rate_limiter=limiter, forwarder=forwarder)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
