"""Normalização de Updates do Telegram em InboundEvent.

Responsabilidade:
- Aceitar apenas mensagens novas de chats privados
- Usar o chat id como chave de sessão
- Preservar o texto como veio (sem trim); sticker/foto viram evento vazio
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from connect_volunteers.adapters.telegram.models import TelegramUpdate
from connect_volunteers.domain.models import InboundEvent
from connect_volunteers.observability.logging import get_logger

logger = get_logger(__name__)

_PRIVATE_CHAT = "private"


def parse_update(payload: dict[str, Any]) -> TelegramUpdate | None:
    """Valida o payload bruto; None se não for um Update reconhecível."""
    try:
        return TelegramUpdate.model_validate(payload)
    except ValidationError as e:
        logger.warning("telegram_update_invalid", extra={"error_count": e.error_count()})
        return None


def normalize_update(update: TelegramUpdate) -> InboundEvent | None:
    """Converte Update em InboundEvent.

    Retorna None para o que o diálogo não trata: edições, callbacks,
    e mensagens de grupos ou canais.
    """
    message = update.message
    if message is None:
        logger.debug("telegram_update_skipped", extra={"reason": "no_message"})
        return None

    if message.chat.type != _PRIVATE_CHAT:
        logger.debug(
            "telegram_update_skipped",
            extra={"reason": "non_private_chat", "chat_type": message.chat.type},
        )
        return None

    return InboundEvent(
        session_key=str(message.chat.id),
        text=message.text,
        event_id=str(update.update_id),
    )
