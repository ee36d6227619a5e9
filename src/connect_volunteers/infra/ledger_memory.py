"""LedgerSink em memória (apenas dev/testes)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from connect_volunteers.domain.enums import RequestCategory
from connect_volunteers.domain.models import CompletedRecord
from connect_volunteers.domain.protocols.ledger_sink import LedgerSink
from connect_volunteers.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LedgerRow:
    category: RequestCategory
    record: CompletedRecord
    timestamp: datetime


@dataclass(slots=True)
class InMemoryLedgerSink(LedgerSink):
    """Guarda as linhas anexadas em lista, na ordem de chegada."""

    rows: list[LedgerRow] = field(default_factory=list)

    async def append(
        self,
        category: RequestCategory,
        record: CompletedRecord,
        timestamp: datetime,
    ) -> None:
        self.rows.append(LedgerRow(category=category, record=record, timestamp=timestamp))
        logger.info("ledger_row_appended", extra={"category": category.value, "sink": "memory"})

    def rows_for(self, category: RequestCategory) -> list[LedgerRow]:
        return [row for row in self.rows if row.category == category]
