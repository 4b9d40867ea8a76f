"""Entrypoint: python -m signal_relay"""
from __future__ import annotations

import uvicorn

from signal_relay.config import settings
from signal_relay.log_config import configure_logging


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "signal_relay.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL,
    )


if __name__ == "__main__":
    main()
