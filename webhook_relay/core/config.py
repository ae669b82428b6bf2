"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DEFAULT_DESTINATION_NAME = "default"

# WeCom group robot endpoint; the key identifies the target group chat.
WECOM_WEBHOOK_URL = "https://qyapi.weixin.qq.com/cgi-bin/webhook/send?key={key}"


def _build_relay_settings() -> "RelaySettings":
    """Build relay settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    However, static type checkers often treat required fields as required
    constructor arguments, which is not how BaseSettings is intended to be used.
    """

    return RelaySettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment.

    See _build_relay_settings() for rationale about the type ignore.
    """

    return LogSettings()  # type: ignore[call-arg]


class RelaySettings(BaseSettings):
    """Destinations, rate limiting and forwarding configuration."""

    destinations: dict[str, str] = Field(
        default_factory=lambda: {
            DEFAULT_DESTINATION_NAME: WECOM_WEBHOOK_URL.format(
                key="00000000-0000-0000-0000-000000000000"
            ),
        },
        description="Static mapping of destination name to webhook URL (JSON object)",
    )
    default_destination: str = Field(
        DEFAULT_DESTINATION_NAME,
        description="Destination used when the route omits one and by the root route",
    )
    rate_limit_max: int = Field(
        50,
        description="Maximum admitted calls per destination within the window",
        ge=1,
    )
    rate_limit_window_seconds: float = Field(
        60.0,
        description="Sliding window size in seconds",
        gt=0,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    forward_timeout_seconds: float | None = Field(
        10.0,
        description="Timeout for the outbound POST in seconds (null disables it)",
    )
    alert_timezone: str = Field(
        "Asia/Shanghai",
        description="IANA time zone used to stamp alerts relayed by the root route",
    )

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        case_sensitive=False,
        env_parse_none_str="null",
    )

    @field_validator("destinations")
    @classmethod
    def _check_destinations(cls, value: dict[str, str]) -> dict[str, str]:
        for name, url in value.items():
            if not name or not url:
                raise ValueError("destination names and URLs must be non-empty")
        return value


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file at this size (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.

    Environments:
    - development: Local development
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    host: str = Field("0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(3000, description="Listening port (PORT)")
    relay: RelaySettings = Field(default_factory=_build_relay_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
