from typing import Any

from fastapi import APIRouter, Depends

from webhook_relay.api.dependencies import get_relay_service, read_payload
from webhook_relay.services.message_builder import build_markdown_message, build_text_message
from webhook_relay.services.relay_service import RelayService

router = APIRouter(prefix="/api/send", tags=["Send"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Invalid body/content, or the destination rejected the message"},
    404: {"description": "Unknown destination"},
    429: {"description": "Destination rate limit exceeded"},
    500: {"description": "Destination unreachable or replied with non-JSON"},
}


# Markdown routes are registered first so "/api/send/markdown" is not taken
# as a destination named "markdown".
@router.post("/markdown", responses=_ERROR_RESPONSES)
@router.post("/markdown/{destination}", responses=_ERROR_RESPONSES)
async def send_markdown(
    destination: str | None = None,
    payload: Any = Depends(read_payload),
    service: RelayService = Depends(get_relay_service),
) -> Any:
    """Send a markdown message to a destination.

    Body: ``{"content": "..."}``. Mention fields are ignored.

    Returns:
        The destination's JSON response when it accepted the message.
    """
    return await service.send(destination, payload, build_markdown_message)


@router.post("", responses=_ERROR_RESPONSES)
@router.post("/{destination}", responses=_ERROR_RESPONSES)
async def send_text(
    destination: str | None = None,
    payload: Any = Depends(read_payload),
    service: RelayService = Depends(get_relay_service),
) -> Any:
    """Send a text message to a destination (``default`` when omitted).

    Body: ``{"content": "...", "mentioned_list": [...], "mentioned_mobile_list": [...]}``.

    Returns:
        The destination's JSON response when it accepted the message.
    """
    return await service.send(destination, payload, build_text_message)
