"""Builders turning inbound payloads into outbound messages.

Validation happens here so the routes only decide which builder to use:
- Text messages accept optional mention lists
- Markdown messages take content only
- Alerts from the monitoring caller are formatted into a fixed text layout
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from webhook_relay.core.errors import ValidationAppError
from webhook_relay.schemas.messages import MarkdownBody, MarkdownMessage, TextBody, TextMessage

ALERT_HEADLINE = "请注意有问题"
ALERT_TITLE = "TrendMiner 监控告警"
ALERT_DEFAULT_CONTENT = "TrendMiner 触发了 webhook 调用"
UNKNOWN_PLACEHOLDER = "未知"
NO_LINK_PLACEHOLDER = "无链接"

# (label, payload field) in display order; the URL line is appended last.
_ALERT_FIELDS = (
    ("事件类型", "webhookCallEvent"),
    ("结果 ID", "resultId"),
    ("结果分数", "resultScore"),
    ("搜索名称", "searchName"),
    ("触发时间", "webhookCallTime"),
)


def _require_object(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationAppError(
            code="invalid_body",
            message="Invalid request body. Must be a JSON object.",
        )
    return payload


def _require_content(payload: Mapping[str, Any]) -> str:
    """Return trimmed content or raise if it is missing, not a string or blank."""
    content = payload.get("content")
    if not isinstance(content, str) or not content.strip():
        raise ValidationAppError(
            code="invalid_content",
            message="Content is required and must be a non-empty string.",
        )
    return content.strip()


def _as_mention_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def build_text_message(payload: Any) -> TextMessage:
    """Build a text message from an inbound JSON payload.

    Args:
        payload: Decoded request body.

    Returns:
        TextMessage with trimmed content and the mention lists, order preserved.

    Raises:
        ValidationAppError: If the body is not an object or content is invalid.

    Examples:
        >>> build_text_message({"content": "  hi  "}).text.content
        'hi'
    """
    body = _require_object(payload)
    content = _require_content(body)
    return TextMessage(
        text=TextBody(
            content=content,
            mentioned_list=_as_mention_list(body.get("mentioned_list")),
            mentioned_mobile_list=_as_mention_list(body.get("mentioned_mobile_list")),
        )
    )


def build_markdown_message(payload: Any) -> MarkdownMessage:
    """Build a markdown message; any mention fields in the payload are ignored."""
    body = _require_object(payload)
    return MarkdownMessage(markdown=MarkdownBody(content=_require_content(body)))


def _field_or(payload: Mapping[str, Any], key: str, placeholder: str) -> str:
    value = payload.get(key)
    if value is None or value == "":
        return placeholder
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value, ensure_ascii=False)


def format_alert_content(payload: Any) -> str:
    """Summarize a monitoring-alert payload as readable text.

    A JSON object contributes its known fields, with a placeholder for each
    missing one. A string payload is used as-is (trimmed). Anything else falls
    back to a fixed sentence.
    """
    if isinstance(payload, Mapping):
        lines = [ALERT_TITLE]
        lines.extend(
            f"{label}: {_field_or(payload, key, UNKNOWN_PLACEHOLDER)}"
            for label, key in _ALERT_FIELDS
        )
        lines.append(f"查看详情: {_field_or(payload, 'resultUrl', NO_LINK_PLACEHOLDER)}")
        return "\n".join(lines)

    if isinstance(payload, str) and payload.strip():
        return payload.strip()

    return ALERT_DEFAULT_CONTENT


def format_alert_timestamp(now: datetime | None = None, *, timezone: str = "Asia/Shanghai") -> str:
    """Render ``now`` as ``YYYY/MM/DD HH:MM:SS`` in the given time zone."""
    tz = ZoneInfo(timezone)
    moment = now.astimezone(tz) if now is not None else datetime.now(tz)
    return moment.strftime("%Y/%m/%d %H:%M:%S")


def build_alert_message(
    payload: Any,
    *,
    now: datetime | None = None,
    timezone: str = "Asia/Shanghai",
) -> TextMessage:
    """Build the warning text message relayed for a monitoring alert."""
    content = format_alert_content(payload)
    timestamp = format_alert_timestamp(now, timezone=timezone)
    return TextMessage(text=TextBody(content=f"{ALERT_HEADLINE}\n{content}\n时间：{timestamp}"))
