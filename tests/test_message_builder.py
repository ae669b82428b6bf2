"""Tests for inbound payload validation and outbound message construction."""

from datetime import datetime, timezone

import pytest

from webhook_relay.core.errors import ValidationAppError
from webhook_relay.schemas.messages import MarkdownMessage, TextMessage, to_wire
from webhook_relay.services.message_builder import (
    ALERT_DEFAULT_CONTENT,
    ALERT_HEADLINE,
    NO_LINK_PLACEHOLDER,
    UNKNOWN_PLACEHOLDER,
    build_alert_message,
    build_markdown_message,
    build_text_message,
    format_alert_content,
    format_alert_timestamp,
)


class TestTextMessage:
    def test_trims_content(self) -> None:
        message = build_text_message({"content": "  hi  "})

        assert isinstance(message, TextMessage)
        assert message.text.content == "hi"
        assert message.text.mentioned_list == []
        assert message.text.mentioned_mobile_list == []

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_blank_content_is_rejected(self, content: str) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            build_text_message({"content": content})

        assert exc_info.value.code == "invalid_content"

    @pytest.mark.parametrize("payload", [{}, {"content": None}, {"content": 42}, {"content": ["x"]}])
    def test_missing_or_non_string_content_is_rejected(self, payload: dict) -> None:
        with pytest.raises(ValidationAppError):
            build_text_message(payload)

    @pytest.mark.parametrize("payload", [None, "plain text", ["content"], 3])
    def test_non_object_body_is_rejected(self, payload: object) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            build_text_message(payload)

        assert exc_info.value.code == "invalid_body"

    def test_mentions_keep_order_on_the_wire(self) -> None:
        message = build_text_message(
            {
                "content": "deploy done",
                "mentioned_list": ["a", "b"],
                "mentioned_mobile_list": ["13800001111"],
            }
        )

        assert to_wire(message) == {
            "msgtype": "text",
            "text": {
                "content": "deploy done",
                "mentioned_list": ["a", "b"],
                "mentioned_mobile_list": ["13800001111"],
            },
        }

    def test_non_list_mentions_default_to_empty(self) -> None:
        message = build_text_message(
            {"content": "x", "mentioned_list": "@all", "mentioned_mobile_list": {"a": 1}}
        )

        assert message.text.mentioned_list == []
        assert message.text.mentioned_mobile_list == []

    def test_non_string_mention_entries_are_dropped(self) -> None:
        message = build_text_message(
            {"content": "x", "mentioned_list": [None, "bob", 7], "mentioned_mobile_list": [13800001111, "@all"]}
        )

        assert message.text.mentioned_list == ["bob"]
        assert message.text.mentioned_mobile_list == ["@all"]


class TestMarkdownMessage:
    def test_ignores_mention_fields(self) -> None:
        message = build_markdown_message(
            {"content": " **bold** ", "mentioned_list": ["a"], "mentioned_mobile_list": ["1"]}
        )

        assert isinstance(message, MarkdownMessage)
        assert to_wire(message) == {"msgtype": "markdown", "markdown": {"content": "**bold**"}}

    def test_blank_content_is_rejected(self) -> None:
        with pytest.raises(ValidationAppError):
            build_markdown_message({"content": "  "})


class TestAlertMessage:
    def test_partial_payload_uses_placeholders(self) -> None:
        content = format_alert_content({"resultId": "R1", "webhookCallEvent": "alert"})

        assert "R1" in content
        assert "alert" in content
        # resultScore, searchName, webhookCallTime are missing
        assert content.count(UNKNOWN_PLACEHOLDER) == 3
        assert content.endswith(NO_LINK_PLACEHOLDER)

    def test_full_payload_lists_every_field(self) -> None:
        content = format_alert_content(
            {
                "resultId": "R9",
                "resultScore": 0.87,
                "resultUrl": "https://trendminer.example/r/R9",
                "searchName": "Pump pressure",
                "webhookCallEvent": "RESULT_DETECTED",
                "webhookCallTime": "2024-05-01T08:00:00Z",
            }
        )

        assert UNKNOWN_PLACEHOLDER not in content
        assert "0.87" in content
        assert "Pump pressure" in content
        assert "https://trendminer.example/r/R9" in content

    def test_non_string_fields_render_as_json(self) -> None:
        content = format_alert_content(
            {"resultId": True, "resultScore": 90.0, "searchName": {"a": 1}, "webhookCallEvent": ["x", "告警"]}
        )

        assert "结果 ID: true" in content
        assert "结果分数: 90\n" in content
        assert '搜索名称: {"a": 1}' in content
        assert '事件类型: ["x", "告警"]' in content
        assert "True" not in content

    def test_zero_score_is_not_a_placeholder(self) -> None:
        assert "结果分数: 0\n" in format_alert_content({"resultScore": 0})

    def test_string_payload_is_used_verbatim(self) -> None:
        assert format_alert_content("  disk full  ") == "disk full"

    @pytest.mark.parametrize("payload", [None, "   ", ["x"], 12])
    def test_unusable_payload_falls_back_to_default(self, payload: object) -> None:
        assert format_alert_content(payload) == ALERT_DEFAULT_CONTENT

    def test_timestamp_uses_configured_zone(self) -> None:
        moment = datetime(2024, 1, 2, 16, 4, 5, tzinfo=timezone.utc)

        assert format_alert_timestamp(moment) == "2024/01/03 00:04:05"
        assert format_alert_timestamp(moment, timezone="UTC") == "2024/01/02 16:04:05"

    def test_alert_message_layout(self) -> None:
        moment = datetime(2024, 1, 2, 1, 0, 0, tzinfo=timezone.utc)

        message = build_alert_message("pump stopped", now=moment)

        assert message.text.content == f"{ALERT_HEADLINE}\npump stopped\n时间：2024/01/02 09:00:00"
