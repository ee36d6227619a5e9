"""Factories de infraestrutura selecionadas por Settings.

Backends:
- memory: dev/testes (proibido em staging/prod pela validação de Settings)
- redis: estado de diálogo e dedupe duráveis
- sheets: ledger no Google Sheets
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from connect_volunteers.domain.protocols.dialogue_store import DialogueStore
from connect_volunteers.domain.protocols.ledger_sink import LedgerSink
from connect_volunteers.observability.logging import get_logger

if TYPE_CHECKING:
    from connect_volunteers.config.settings import Settings

logger: logging.Logger = get_logger(__name__)


def create_redis_client(settings: Settings) -> Any | None:
    """Cria cliente `redis.asyncio` se algum backend precisar dele."""
    needs_redis = "redis" in (
        settings.dialogue_store_backend.lower(),
        settings.dedupe_backend.lower(),
    )
    if not needs_redis:
        return None
    if not settings.redis_url:
        raise ValueError("Backend redis requer REDIS_URL configurado")

    from redis import asyncio as redis_asyncio

    logger.info("Cliente Redis criado")
    return redis_asyncio.from_url(settings.redis_url)


def create_dialogue_store(settings: Settings, redis_client: Any | None = None) -> DialogueStore:
    """Factory do DialogueStore conforme `dialogue_store_backend`."""
    backend = settings.dialogue_store_backend.lower()

    if backend == "redis":
        if redis_client is None:
            raise ValueError("DIALOGUE_STORE_BACKEND=redis requer REDIS_URL configurado")
        from connect_volunteers.infra.dialogue_store_redis import RedisDialogueStore

        logger.info("Usando RedisDialogueStore")
        return RedisDialogueStore(
            redis_client, max_cas_retries=settings.dialogue_store_max_cas_retries
        )

    if backend == "memory":
        from connect_volunteers.infra.dialogue_store_memory import InMemoryDialogueStore

        logger.info("Usando InMemoryDialogueStore")
        return InMemoryDialogueStore()

    raise ValueError(f"Backend de estado não reconhecido: {backend}")


def create_ledger_sink(settings: Settings) -> LedgerSink:
    """Factory do LedgerSink conforme `ledger_backend`."""
    backend = settings.ledger_backend.lower()

    if backend == "sheets":
        from connect_volunteers.infra.ledger_sheets import create_sheets_ledger_sink

        logger.info("Usando GoogleSheetsLedgerSink")
        return create_sheets_ledger_sink(settings)

    if backend == "memory":
        from connect_volunteers.infra.ledger_memory import InMemoryLedgerSink

        logger.info("Usando InMemoryLedgerSink")
        return InMemoryLedgerSink()

    raise ValueError(f"Backend de ledger não reconhecido: {backend}")
