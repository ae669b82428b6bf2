"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from webhook_relay.core.config import RelaySettings, Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("RELAY_DESTINATIONS", raising=False)

    cfg = Settings()

    assert cfg.port == 3000
    assert list(cfg.relay.destinations) == ["default"]
    assert cfg.relay.rate_limit_max == 50
    assert cfg.relay.rate_limit_window_seconds == 60
    assert cfg.relay.alert_timezone == "Asia/Shanghai"


def test_port_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")

    assert Settings().port == 8080


def test_destinations_from_json_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RELAY_DESTINATIONS", '{"default": "https://a/send?key=1", "oncall": "https://b/send?key=2"}')

    relay = RelaySettings()

    assert relay.destinations == {
        "default": "https://a/send?key=1",
        "oncall": "https://b/send?key=2",
    }


def test_rejects_empty_destination_url() -> None:
    with pytest.raises(ValidationError):
        RelaySettings(destinations={"default": ""})


def test_rejects_non_positive_limits() -> None:
    with pytest.raises(ValidationError):
        RelaySettings(rate_limit_max=0)
    with pytest.raises(ValidationError):
        RelaySettings(rate_limit_window_seconds=0)
