"""Root routes used by the TrendMiner monitoring webhook.

TrendMiner treats any non-200 status as a failed delivery and keeps retrying,
so ``POST /`` answers 200 whatever happens and reports failures in the body.
This rule applies to these routes only; ``/api/send*`` uses regular statuses.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from webhook_relay.api.dependencies import get_relay_service, read_payload
from webhook_relay.schemas.relay import AlertRelayResponse
from webhook_relay.services.relay_service import RelayService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Alerts"])

USAGE_HINT = "请调用 POST 请求来发送消息"
SENT_MESSAGE = "消息已发送"
FAILED_MESSAGE = "消息发送过程中出现错误，但已记录"


@router.get("/", response_class=PlainTextResponse)
def usage() -> str:
    return USAGE_HINT


@router.post(
    "/",
    response_model=AlertRelayResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
async def relay_alert(
    payload: Any = Depends(read_payload),
    service: RelayService = Depends(get_relay_service),
) -> AlertRelayResponse:
    """Forward a monitoring alert to the default destination.

    Returns:
        AlertRelayResponse: always with HTTP 200; ``wechatResult`` holds the
            destination reply (whatever its errcode), ``error`` the failure.
    """
    try:
        result = await service.forward_alert(payload)
    except Exception as exc:
        logger.exception(
            "alert.relay_failed",
            extra={"error_type": type(exc).__name__},
        )
        return AlertRelayResponse(message=FAILED_MESSAGE, error=str(exc))

    return AlertRelayResponse(message=SENT_MESSAGE, wechat_result=result)
