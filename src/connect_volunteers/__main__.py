"""Executa o bot em modo long polling: `python -m connect_volunteers`."""

from __future__ import annotations

import asyncio
import signal

from connect_volunteers.adapters.telegram.polling import TelegramUpdatePoller
from connect_volunteers.bootstrap import build_runtime
from connect_volunteers.config.settings import get_settings
from connect_volunteers.observability.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def run_polling() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.service_name)

    # long polling segura a conexão por até `timeout` segundos
    runtime = build_runtime(
        settings,
        telegram_timeout_seconds=(
            settings.telegram_polling_timeout_seconds + settings.telegram_request_timeout_seconds
        ),
    )
    poller = TelegramUpdatePoller(
        runtime.telegram_http,
        settings.telegram_bot_token or "",
        runtime.dedupe,
        runtime.driver,
        api_base_url=settings.telegram_api_base_url,
        timeout_seconds=settings.telegram_polling_timeout_seconds,
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    try:
        await poller.run(stop)
    finally:
        await runtime.close()


def main() -> None:
    asyncio.run(run_polling())


if __name__ == "__main__":
    main()
