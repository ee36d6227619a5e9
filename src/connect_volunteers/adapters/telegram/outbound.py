"""Transporte outbound via Telegram Bot API (sendMessage).

Responsabilidade:
- Converter OutboundReply em payload do sendMessage
- `suggested_replies` vira teclado de uma linha; vazio remove o teclado
- Nunca logar o token (vai no path da URL) nem o texto enviado
"""

from __future__ import annotations

import logging
from typing import Any

from connect_volunteers.domain.models import OutboundReply
from connect_volunteers.domain.protocols.chat_transport import ChatTransport, TransportError
from connect_volunteers.infra.http import HttpClient, HttpError
from connect_volunteers.observability.logging import get_logger, mask_session_key

logger: logging.Logger = get_logger(__name__)


def build_reply_markup(suggested_replies: tuple[str, ...]) -> dict[str, Any]:
    """Teclado de resposta: uma linha com todos os botões, ou remoção."""
    if not suggested_replies:
        return {"remove_keyboard": True}
    return {
        "keyboard": [[{"text": label} for label in suggested_replies]],
        "resize_keyboard": True,
    }


def build_send_message_payload(reply: OutboundReply) -> dict[str, Any]:
    return {
        "chat_id": reply.session_key,
        "text": reply.text,
        "reply_markup": build_reply_markup(reply.suggested_replies),
    }


class TelegramTransport(ChatTransport):
    """ChatTransport sobre o Bot API."""

    def __init__(
        self,
        http_client: HttpClient,
        bot_token: str,
        api_base_url: str = "https://api.telegram.org",
    ) -> None:
        self._http = http_client
        self._base = f"{api_base_url.rstrip('/')}/bot{bot_token}"

    def method_url(self, method: str) -> str:
        return f"{self._base}/{method}"

    async def send_reply(self, reply: OutboundReply) -> None:
        try:
            response = await self._http.post(
                self.method_url("sendMessage"),
                json=build_send_message_payload(reply),
            )
        except HttpError as e:
            logger.warning(
                "telegram_send_failed",
                extra={
                    "session_key": mask_session_key(reply.session_key),
                    "status_code": e.status_code,
                },
            )
            raise TransportError(f"sendMessage failed: {e}") from e

        try:
            body = response.json()
            ok = bool(body.get("ok", False))
        except (ValueError, AttributeError) as e:
            logger.warning(
                "telegram_send_bad_response",
                extra={
                    "session_key": mask_session_key(reply.session_key),
                    "status_code": response.status_code,
                },
            )
            raise TransportError("sendMessage returned a non-JSON body") from e

        if not ok:
            logger.warning(
                "telegram_send_rejected",
                extra={
                    "session_key": mask_session_key(reply.session_key),
                    "error_code": body.get("error_code"),
                },
            )
            raise TransportError(f"sendMessage rejected: {body.get('description')}")

        logger.debug(
            "telegram_reply_sent",
            extra={
                "session_key": mask_session_key(reply.session_key),
                "buttons": len(reply.suggested_replies),
            },
        )
