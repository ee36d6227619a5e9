"""Driver de sessão: liga a função de transição às portas de I/O.

Fluxo por evento:
1. Leitura+transição+escrita atômica no DialogueStore (por sessão)
2. Envio da resposta (se houver)
3. Gravação no ledger (apenas em COMMITTED)

Falhas:
- DialogueStoreError propaga: nada foi enviado, evento pode ser reenviado
- Falha de transporte (qualquer exceção): estado já avançou; registrada no
  resultado, sem retry; o ledger roda mesmo assim
- Falha do ledger (LedgerSinkError, timeout ou outra): registro completo vai
  para o log de erro e é descartado
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone
from typing import TYPE_CHECKING

from connect_volunteers.domain.dialogue import Transition, transition
from connect_volunteers.domain.enums import TransitionOutcome
from connect_volunteers.domain.protocols.chat_transport import TransportError
from connect_volunteers.observability.logging import get_logger, mask_session_key
from connect_volunteers.observability.timing import timed

if TYPE_CHECKING:
    from connect_volunteers.domain.dialogue import DialogueState
    from connect_volunteers.domain.models import CommitAction, InboundEvent, OutboundReply
    from connect_volunteers.domain.protocols import ChatTransport, DialogueStore, LedgerSink

logger: logging.Logger = get_logger(__name__)


@dataclass(slots=True)
class DriverOutcome:
    """Resultado do processamento de um evento (sem PII)."""

    outcome: TransitionOutcome
    state: str
    reply: OutboundReply | None = None
    reply_delivered: bool | None = None
    ledger_written: bool | None = None


class SessionDriver:
    """Processa eventos de uma ou várias sessões.

    Eventos de sessões diferentes podem rodar em paralelo; eventos da mesma
    sessão são serializados pelo `atomic_update` do store.
    """

    def __init__(
        self,
        store: DialogueStore,
        transport: ChatTransport,
        sink: LedgerSink,
        *,
        utc_offset_hours: int = 3,
        reply_timeout_seconds: float = 30.0,
        ledger_timeout_seconds: float = 45.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._transport = transport
        self._sink = sink
        self._tz = timezone(timedelta(hours=utc_offset_hours))
        self._reply_timeout = reply_timeout_seconds
        self._ledger_timeout = ledger_timeout_seconds
        self._clock = clock or (lambda: datetime.now(UTC))

    def commit_timestamp(self) -> datetime:
        """Hora do commit no fuso fixo configurado."""
        return self._clock().astimezone(self._tz)

    async def handle(self, event: InboundEvent) -> DriverOutcome:
        """Processa um evento.

        Raises:
            DialogueStoreError: estado não pôde ser lido/gravado
        """
        if event.is_empty:
            logger.debug(
                "event_ignored_empty",
                extra={"session_key": mask_session_key(event.session_key)},
            )
            return DriverOutcome(outcome=TransitionOutcome.IGNORED, state="unchanged")

        result: list[Transition] = []

        def apply(current: DialogueState) -> DialogueState:
            # pode rodar mais de uma vez (CAS); vale a última execução
            result[:] = [transition(current, event)]
            return result[0].next_state

        with timed("dialogue_store"):
            await self._store.atomic_update(event.session_key, apply)
        step = result[0]
        committed_at = self.commit_timestamp()

        outcome = DriverOutcome(
            outcome=step.outcome,
            state=step.next_state.kind,
            reply=step.reply,
        )

        try:
            if step.reply is not None:
                outcome.reply_delivered = await self._deliver(step.reply)
        finally:
            # o registro aceito vai ao ledger mesmo se a entrega escapar
            if step.commit is not None:
                outcome.ledger_written = await self._commit(
                    event.session_key, step.commit, committed_at
                )

        logger.info(
            "event_processed",
            extra={
                "session_key": mask_session_key(event.session_key),
                "event_id": event.event_id,
                "outcome": step.outcome.value,
                "state": step.next_state.kind,
                "reply_delivered": outcome.reply_delivered,
                "ledger_written": outcome.ledger_written,
            },
        )
        return outcome

    async def redeliver(self, reply: OutboundReply) -> bool:
        """Reenvia apenas a resposta; o estado não é tocado."""
        return await self._deliver(reply)

    async def _deliver(self, reply: OutboundReply) -> bool:
        try:
            with timed("chat_transport"):
                await asyncio.wait_for(
                    self._transport.send_reply(reply), timeout=self._reply_timeout
                )
        except (TransportError, TimeoutError) as e:
            logger.warning(
                "reply_not_delivered",
                extra={
                    "session_key": mask_session_key(reply.session_key),
                    "error_type": type(e).__name__,
                },
            )
            return False
        except Exception as e:
            logger.error(
                "reply_not_delivered",
                extra={
                    "session_key": mask_session_key(reply.session_key),
                    "error_type": type(e).__name__,
                },
                exc_info=e,
            )
            return False
        return True

    async def _commit(
        self, session_key: str, commit: CommitAction, timestamp: datetime
    ) -> bool:
        try:
            with timed("ledger_sink"):
                await asyncio.wait_for(
                    self._sink.append(commit.category, commit.record, timestamp),
                    timeout=self._ledger_timeout,
                )
        except Exception as e:
            # registro completo no log: única cópia para recuperação manual
            logger.error(
                "ledger_commit_lost",
                extra={
                    "session_key": session_key,
                    "category": commit.category.value,
                    "record": commit.record.model_dump(),
                    "timestamp": timestamp.isoformat(),
                    "error_type": type(e).__name__,
                },
            )
            return False
        return True
