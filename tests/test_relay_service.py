"""Tests for the relay service orchestration."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from webhook_relay.adapters.messaging.base import AbstractMessageForwarder
from webhook_relay.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from webhook_relay.core.errors import (
    DestinationRejectedAppError,
    NotFoundAppError,
    RateLimitAppError,
    TransportAppError,
    ValidationAppError,
)
from webhook_relay.services.message_builder import build_text_message
from webhook_relay.services.relay_service import Destination, RelayService

DESTINATIONS = {
    "default": "https://relay.test/send?key=d",
    "ops": "https://relay.test/send?key=o",
}


def _service(forwarder: AbstractMessageForwarder, *, limit: int = 2) -> RelayService:
    limiter = InMemorySlidingWindowRateLimiter(
        limit=limit,
        window_seconds=60,
        clock=Mock(return_value=0.0),
    )
    return RelayService(destinations=DESTINATIONS, rate_limiter=limiter, forwarder=forwarder)


def test_resolve_defaults_to_default_destination(forwarder) -> None:
    service = _service(forwarder)

    assert service.resolve(None) == Destination(name="default", url=DESTINATIONS["default"])
    assert service.resolve("ops").url == DESTINATIONS["ops"]


def test_resolve_unknown_destination(forwarder) -> None:
    service = _service(forwarder)

    with pytest.raises(NotFoundAppError) as exc_info:
        service.resolve("nope")

    assert exc_info.value.details == {"destination": "nope"}


@pytest.mark.asyncio
async def test_send_forwards_to_destination_url(forwarder) -> None:
    service = _service(forwarder)

    result = await service.send("ops", {"content": " hi "}, build_text_message)

    assert result == {"errcode": 0, "errmsg": "ok"}
    url, message = forwarder.calls[0]
    assert url == DESTINATIONS["ops"]
    assert message.text.content == "hi"


@pytest.mark.asyncio
async def test_send_rejects_when_window_exhausted(forwarder) -> None:
    service = _service(forwarder, limit=2)

    await service.send(None, {"content": "1"}, build_text_message)
    await service.send(None, {"content": "2"}, build_text_message)

    with pytest.raises(RateLimitAppError) as exc_info:
        await service.send(None, {"content": "3"}, build_text_message)

    assert exc_info.value.details["retry_after"] == 60
    assert len(forwarder.calls) == 2

    # Another destination has its own window
    await service.send("ops", {"content": "4"}, build_text_message)
    assert len(forwarder.calls) == 3


@pytest.mark.asyncio
async def test_invalid_payload_still_consumes_budget(forwarder) -> None:
    service = _service(forwarder, limit=1)

    with pytest.raises(ValidationAppError):
        await service.send(None, {"content": ""}, build_text_message)

    with pytest.raises(RateLimitAppError):
        await service.send(None, {"content": "ok"}, build_text_message)

    assert forwarder.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        {"errcode": 93000, "errmsg": "invalid webhook url"},
        {"errmsg": "no errcode"},
        {"errcode": False, "errmsg": "boolean is not zero"},
        ["not", "an", "object"],
    ],
)
async def test_deliver_rejects_non_zero_errcode(make_forwarder, response: object) -> None:
    service = _service(make_forwarder(response=response))

    with pytest.raises(DestinationRejectedAppError) as exc_info:
        await service.send(None, {"content": "x"}, build_text_message)

    assert exc_info.value.details["response"] == response


@pytest.mark.asyncio
async def test_forward_alert_ignores_errcode(make_forwarder) -> None:
    body = {"errcode": 45009, "errmsg": "api freq out of limit"}
    forwarder = make_forwarder(response=body)
    service = _service(forwarder)

    result = await service.forward_alert(
        {"resultId": "R1"},
        now=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )

    assert result == body
    url, message = forwarder.calls[0]
    assert url == DESTINATIONS["default"]
    assert message.text.content.endswith("时间：2024/01/01 08:00:00")


@pytest.mark.asyncio
async def test_forward_alert_propagates_failures(make_forwarder) -> None:
    error = TransportAppError(code="destination_unreachable", message="down")
    service = _service(make_forwarder(error=error))

    with pytest.raises(TransportAppError):
        await service.forward_alert(None)
