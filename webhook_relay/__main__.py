"""Run the relay with uvicorn: ``python -m webhook_relay``."""

import uvicorn

from webhook_relay.core.config import settings


def main() -> None:
    uvicorn.run(
        "webhook_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
