"""Protocolo de domínio para o transporte de chat (saída)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from connect_volunteers.domain.models import OutboundReply


class TransportError(Exception):
    """Falha ao entregar resposta ao usuário.

    O estado já avançou; apenas a entrega pode ser repetida.
    """

    pass


class ChatTransport(ABC):
    """Entrega respostas; converte `suggested_replies` em teclado."""

    @abstractmethod
    async def send_reply(self, reply: OutboundReply) -> None:
        """Envia a resposta.

        Raises:
            TransportError: falha de entrega
        """
        ...
