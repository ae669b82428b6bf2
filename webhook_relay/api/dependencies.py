from __future__ import annotations

import json
from typing import Any

from fastapi import Request

from webhook_relay.services.relay_service import RelayService


def get_relay_service(request: Request) -> RelayService:
    """FastAPI dependency returning the relay service owned by the running app."""

    return request.app.state.relay_service


async def read_payload(request: Request) -> Any:
    """Decode the request body without rejecting it up front.

    JSON bodies are decoded; any other non-empty body is returned as text;
    an empty or undecodable body yields None. Builders decide what is valid.
    """

    raw = await request.body()
    if not raw:
        return None

    text = raw.decode("utf-8", errors="replace")
    content_type = request.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return None
    return text
