"""Implementação de DialogueStore usando Redis (produção).

Estrutura Redis:
    KEY: dialogue:{session_key}
    VALUE: DialogueState em JSON (campo `kind` como etiqueta)
    Idle: chave removida (ausência equivale a Idle)

`atomic_update` é um compare-and-swap otimista (WATCH/MULTI/EXEC): se outra
escrita tocar a chave entre a leitura e o EXEC, a transação é descartada e
o update é reaplicado sobre o estado novo.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from redis.exceptions import WatchError

from connect_volunteers.domain.dialogue.states import (
    INITIAL_STATE,
    dump_state,
    is_idle,
    load_state,
)
from connect_volunteers.domain.protocols.dialogue_store import (
    DialogueStore,
    DialogueStoreError,
    StateUpdate,
)
from connect_volunteers.observability.logging import get_logger, mask_session_key

if TYPE_CHECKING:
    from connect_volunteers.domain.dialogue.states import DialogueState

logger: logging.Logger = get_logger(__name__)


class RedisDialogueStore(DialogueStore):
    """Armazenamento em Redis (cliente `redis.asyncio`)."""

    def __init__(
        self,
        redis_client: Any,
        key_prefix: str = "dialogue:",
        max_cas_retries: int = 16,
    ) -> None:
        self._redis = redis_client
        self._prefix = key_prefix
        self._max_cas_retries = max_cas_retries

    def _key(self, session_key: str) -> str:
        return f"{self._prefix}{session_key}"

    def _decode(self, session_key: str, payload: str | bytes | None) -> DialogueState:
        if not payload:
            return INITIAL_STATE
        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        try:
            return load_state(payload)
        except ValidationError as e:
            logger.error(
                "dialogue_state_corrupt_reset",
                extra={
                    "session_key": mask_session_key(session_key),
                    "error_count": e.error_count(),
                },
            )
            return INITIAL_STATE

    async def load(self, session_key: str) -> DialogueState:
        try:
            payload = await self._redis.get(self._key(session_key))
        except Exception as e:
            logger.error(
                "Failed to load dialogue state from Redis",
                extra={"session_key": mask_session_key(session_key), "error": str(e)},
            )
            raise DialogueStoreError(f"Redis load failed: {e}") from e
        return self._decode(session_key, payload)

    async def atomic_update(self, session_key: str, update: StateUpdate) -> DialogueState:
        key = self._key(session_key)

        for attempt in range(self._max_cas_retries):
            try:
                async with self._redis.pipeline(transaction=True) as pipe:
                    await pipe.watch(key)
                    current = self._decode(session_key, await pipe.get(key))
                    new_state = update(current)

                    pipe.multi()
                    if is_idle(new_state):
                        pipe.delete(key)
                    else:
                        pipe.set(key, dump_state(new_state))
                    await pipe.execute()
            except WatchError:
                logger.debug(
                    "Dialogue state CAS conflict (Redis)",
                    extra={"session_key": mask_session_key(session_key), "attempt": attempt + 1},
                )
                continue
            except Exception as e:
                logger.error(
                    "Failed to update dialogue state in Redis",
                    extra={"session_key": mask_session_key(session_key), "error": str(e)},
                )
                raise DialogueStoreError(f"Redis update failed: {e}") from e

            logger.debug(
                "Dialogue state saved (Redis)",
                extra={
                    "session_key": mask_session_key(session_key),
                    "state": new_state.kind,
                    "attempts": attempt + 1,
                },
            )
            return new_state

        logger.error(
            "dialogue_state_cas_exhausted",
            extra={
                "session_key": mask_session_key(session_key),
                "max_retries": self._max_cas_retries,
            },
        )
        raise DialogueStoreError(
            f"Redis update gave up after {self._max_cas_retries} conflicting attempts"
        )
