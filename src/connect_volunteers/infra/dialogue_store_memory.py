"""Implementação de DialogueStore em memória (apenas dev/testes)."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from connect_volunteers.domain.dialogue.states import (
    INITIAL_STATE,
    dump_state,
    is_idle,
    load_state,
)
from connect_volunteers.domain.protocols.dialogue_store import DialogueStore, StateUpdate
from connect_volunteers.observability.logging import get_logger, mask_session_key

if TYPE_CHECKING:
    from connect_volunteers.domain.dialogue.states import DialogueState

logger: logging.Logger = get_logger(__name__)


class InMemoryDialogueStore(DialogueStore):
    """Armazenamento em memória com lock por chave.

    ⚠️ Não usar em produção!
    - Não persiste entre restarts
    - Não funciona com múltiplas instâncias
    """

    def __init__(self) -> None:
        # JSON serializado: mesma fidelidade de ida e volta do backend Redis
        self._states: dict[str, str] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        # tarefas segurando ou aguardando o lock de cada chave
        self._lock_users: dict[str, int] = {}

    def _lock_for(self, session_key: str) -> asyncio.Lock:
        lock = self._locks.get(session_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_key] = lock
        return lock

    async def _read(self, session_key: str) -> DialogueState:
        payload = self._states.get(session_key)
        if payload is None:
            return INITIAL_STATE
        return load_state(payload)

    async def _write(self, session_key: str, state: DialogueState) -> None:
        if is_idle(state):
            self._states.pop(session_key, None)
        else:
            self._states[session_key] = dump_state(state)

    def _release_lock(self, session_key: str) -> None:
        """Descarta o lock de sessões em Idle que ninguém mais usa."""
        users = self._lock_users[session_key] - 1
        if users:
            self._lock_users[session_key] = users
            return
        del self._lock_users[session_key]
        if session_key not in self._states:
            self._locks.pop(session_key, None)

    async def load(self, session_key: str) -> DialogueState:
        return await self._read(session_key)

    async def atomic_update(self, session_key: str, update: StateUpdate) -> DialogueState:
        lock = self._lock_for(session_key)
        self._lock_users[session_key] = self._lock_users.get(session_key, 0) + 1
        try:
            async with lock:
                current = await self._read(session_key)
                new_state = update(current)
                await self._write(session_key, new_state)
        finally:
            self._release_lock(session_key)

        logger.debug(
            "Dialogue state saved (in-memory)",
            extra={
                "session_key": mask_session_key(session_key),
                "state": new_state.kind,
            },
        )
        return new_state
