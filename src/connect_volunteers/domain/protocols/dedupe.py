"""Protocolo de domínio para stores de dedupe de eventos inbound."""

from __future__ import annotations

from abc import ABC, abstractmethod


class DedupeError(Exception):
    """Falha no backend de dedupe (fail-closed: evento não processado)."""

    pass


class DedupeStore(ABC):
    """Contrato mínimo para deduplicação de entregas repetidas."""

    @abstractmethod
    async def mark_if_new(self, key: str) -> bool:
        """Marca a chave se não existir (set-if-not-exists).

        Returns:
            True se a chave foi marcada agora (evento novo)
            False se já existia (entrega repetida)

        Raises:
            DedupeError: falha no backend
        """
        ...

    @abstractmethod
    async def clear(self, key: str) -> bool:
        """Remove a marca (permite reprocessar após falha)."""
        ...
