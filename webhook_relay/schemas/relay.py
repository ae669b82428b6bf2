"""Pydantic schemas for relay API responses."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class AlertRelayResponse(BaseModel):
    """Response returned by the root route to the alerting caller.

    The status is always "ok": the caller only inspects the HTTP status code,
    which the root route fixes at 200.
    """

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["ok"] = "ok"
    message: str = Field(..., description="Human-readable outcome.")
    wechat_result: Any | None = Field(
        default=None,
        alias="wechatResult",
        description="Destination response, present when the send completed.",
    )
    error: str | None = Field(
        default=None,
        description="Failure description, present when the send did not complete.",
    )
