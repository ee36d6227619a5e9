"""Montagem dos componentes (compartilhada por webhook e polling)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from connect_volunteers.adapters.telegram.outbound import TelegramTransport
from connect_volunteers.application.session_driver import SessionDriver
from connect_volunteers.config.settings import Settings
from connect_volunteers.domain.protocols import ChatTransport, DedupeStore, DialogueStore, LedgerSink
from connect_volunteers.infra.dedupe import create_dedupe_store
from connect_volunteers.infra.factories import (
    create_dialogue_store,
    create_ledger_sink,
    create_redis_client,
)
from connect_volunteers.infra.http import HttpClient, create_http_client
from connect_volunteers.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


@dataclass(slots=True)
class Runtime:
    """Componentes vivos do processo."""

    settings: Settings
    store: DialogueStore
    dedupe: DedupeStore
    sink: LedgerSink
    transport: ChatTransport
    driver: SessionDriver
    telegram_http: HttpClient
    redis_client: Any | None = None
    closeables: list[Any] = field(default_factory=list)

    async def close(self) -> None:
        """Libera clientes HTTP e Redis."""
        await self.telegram_http.close()
        for resource in self.closeables:
            await resource.close()
        if self.redis_client is not None:
            await self.redis_client.aclose()


def validate_settings(settings: Settings) -> None:
    """Recusa startup com configuração inválida."""
    validation_errors = settings.validate_all()
    if validation_errors:
        error_msg = "; ".join(validation_errors)
        raise ValueError(f"Configuração inválida: {error_msg}")


def build_runtime(
    settings: Settings,
    *,
    telegram_timeout_seconds: float | None = None,
) -> Runtime:
    """Cria store, dedupe, ledger, transporte e driver a partir de Settings."""
    validate_settings(settings)

    redis_client = create_redis_client(settings)
    store = create_dialogue_store(settings, redis_client)
    dedupe = create_dedupe_store(settings, redis_client)
    sink = create_ledger_sink(settings)

    telegram_http = create_http_client(
        settings,
        timeout_seconds=telegram_timeout_seconds or settings.telegram_request_timeout_seconds,
        max_retries=settings.telegram_max_retries,
        backoff_base_seconds=settings.telegram_retry_backoff_seconds,
    )
    transport = TelegramTransport(
        telegram_http,
        settings.telegram_bot_token or "",
        api_base_url=settings.telegram_api_base_url,
    )

    driver = SessionDriver(
        store,
        transport,
        sink,
        utc_offset_hours=settings.ledger_utc_offset_hours,
        reply_timeout_seconds=settings.reply_timeout_seconds,
        ledger_timeout_seconds=settings.ledger_timeout_seconds,
    )

    closeables: list[Any] = []
    sink_http = getattr(sink, "http_client", None)
    if sink_http is not None:
        closeables.append(sink_http)

    logger.info(
        "runtime_ready",
        extra={
            "dialogue_store": type(store).__name__,
            "dedupe": type(dedupe).__name__,
            "ledger": type(sink).__name__,
        },
    )
    return Runtime(
        settings=settings,
        store=store,
        dedupe=dedupe,
        sink=sink,
        transport=transport,
        driver=driver,
        telegram_http=telegram_http,
        redis_client=redis_client,
        closeables=closeables,
    )
