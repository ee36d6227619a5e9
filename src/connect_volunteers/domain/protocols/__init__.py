"""Re-exports dos protocolos de domínio para uso por Application."""

from __future__ import annotations

from connect_volunteers.domain.protocols.chat_transport import ChatTransport, TransportError
from connect_volunteers.domain.protocols.dedupe import DedupeError, DedupeStore
from connect_volunteers.domain.protocols.dialogue_store import (
    DialogueStore,
    DialogueStoreError,
    StateUpdate,
)
from connect_volunteers.domain.protocols.ledger_sink import LedgerSink, LedgerSinkError

__all__ = [
    "ChatTransport",
    "TransportError",
    "DedupeStore",
    "DedupeError",
    "DialogueStore",
    "DialogueStoreError",
    "StateUpdate",
    "LedgerSink",
    "LedgerSinkError",
]
