"""Pydantic schemas for outbound WeCom robot messages."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field


class TextBody(BaseModel):
    """Body of a plain-text message."""

    content: str = Field(..., description="Message text (already trimmed).")
    mentioned_list: list[str] = Field(
        default_factory=list,
        description="User ids to @-mention; '@all' mentions everyone.",
    )
    mentioned_mobile_list: list[str] = Field(
        default_factory=list,
        description="Mobile numbers to @-mention.",
    )


class TextMessage(BaseModel):
    """Plain-text variant of an outbound message."""

    msgtype: Literal["text"] = "text"
    text: TextBody


class MarkdownBody(BaseModel):
    """Body of a markdown message. Markdown messages carry no mentions."""

    content: str = Field(..., description="Markdown source (already trimmed).")


class MarkdownMessage(BaseModel):
    """Markdown variant of an outbound message."""

    msgtype: Literal["markdown"] = "markdown"
    markdown: MarkdownBody


OutboundMessage = Union[TextMessage, MarkdownMessage]


def to_wire(message: OutboundMessage) -> dict[str, Any]:
    """Return the JSON-ready dict the destination expects."""
    return message.model_dump(mode="json")
