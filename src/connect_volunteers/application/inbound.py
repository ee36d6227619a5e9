"""Processamento de um Update do Telegram (webhook ou polling).

Fluxo:
1. Validação do payload e normalização em InboundEvent
2. Dedupe por update_id (fail-closed)
3. SessionDriver

Se o store falhar, a marca de dedupe é removida para que a reentrega do
Telegram seja processada.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from connect_volunteers.adapters.telegram.normalizer import normalize_update, parse_update
from connect_volunteers.domain.protocols.dialogue_store import DialogueStoreError
from connect_volunteers.observability.logging import get_logger

if TYPE_CHECKING:
    from connect_volunteers.application.session_driver import DriverOutcome, SessionDriver
    from connect_volunteers.domain.protocols.dedupe import DedupeStore

logger: logging.Logger = get_logger(__name__)


class InboundStatus(StrEnum):
    PROCESSED = "processed"
    DUPLICATE = "duplicate"
    SKIPPED = "skipped"
    INVALID = "invalid"


@dataclass(slots=True)
class InboundResult:
    status: InboundStatus
    update_id: int | None = None
    outcome: DriverOutcome | None = None


def dedupe_key(update_id: int) -> str:
    return f"telegram:{update_id}"


async def process_update(
    payload: dict[str, Any],
    dedupe: DedupeStore,
    driver: SessionDriver,
) -> InboundResult:
    """Processa um Update bruto.

    Raises:
        DedupeError: backend de dedupe indisponível
        DialogueStoreError: estado não pôde ser gravado (marca removida)
    """
    update = parse_update(payload)
    if update is None:
        return InboundResult(status=InboundStatus.INVALID)

    event = normalize_update(update)
    if event is None:
        return InboundResult(status=InboundStatus.SKIPPED, update_id=update.update_id)

    key = dedupe_key(update.update_id)
    if not await dedupe.mark_if_new(key):
        logger.info("duplicate_update_ignored", extra={"update_id": update.update_id})
        return InboundResult(status=InboundStatus.DUPLICATE, update_id=update.update_id)

    try:
        outcome = await driver.handle(event)
    except DialogueStoreError:
        await dedupe.clear(key)
        logger.warning(
            "update_unprocessed_store_error",
            extra={"update_id": update.update_id},
        )
        raise

    return InboundResult(
        status=InboundStatus.PROCESSED,
        update_id=update.update_id,
        outcome=outcome,
    )
