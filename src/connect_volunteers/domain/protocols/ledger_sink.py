"""Protocolo de domínio para o ledger append-only."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from connect_volunteers.domain.enums import RequestCategory
    from connect_volunteers.domain.models import CompletedRecord


class LedgerSinkError(Exception):
    """Falha ao anexar linha no ledger (registro não gravado)."""

    pass


class LedgerSink(ABC):
    """Destino externo dos registros confirmados (um destino por categoria)."""

    @abstractmethod
    async def append(
        self,
        category: RequestCategory,
        record: CompletedRecord,
        timestamp: datetime,
    ) -> None:
        """Anexa uma linha: nome, telefone, endereço, comentário, timestamp.

        O timestamp é atribuído pelo driver no momento do commit.

        Raises:
            LedgerSinkError: falha de escrita
        """
        ...
