"""Protocolo de domínio para persistência do estado de diálogo."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from connect_volunteers.domain.dialogue.states import DialogueState


StateUpdate = Callable[["DialogueState"], "DialogueState"]
"""Função pura aplicada ao estado atual dentro de `atomic_update`."""


class DialogueStoreError(Exception):
    """Erro ao ler ou gravar estado de diálogo.

    O evento que o causou é considerado não processado e pode ser
    reenviado com segurança (nenhuma resposta foi enviada).
    """

    pass


class DialogueStore(ABC):
    """Mapa durável SessionKey → DialogueState.

    Implementações devem garantir:
    - Chave nunca vista (ou expirada) é lida como Idle
    - `atomic_update` serializa leitura+escrita por chave: dois eventos
      concorrentes da mesma sessão nunca partem do mesmo snapshot
    - `update` pode ser chamado mais de uma vez (CAS otimista); deve ser pura
    """

    @abstractmethod
    async def load(self, session_key: str) -> DialogueState:
        """Carrega estado; Idle se ausente.

        Raises:
            DialogueStoreError: falha no backend
        """
        ...

    @abstractmethod
    async def atomic_update(self, session_key: str, update: StateUpdate) -> DialogueState:
        """Aplica `update` ao estado atual e persiste o resultado atomicamente.

        Returns:
            Estado persistido

        Raises:
            DialogueStoreError: falha no backend (nada foi gravado)
        """
        ...
