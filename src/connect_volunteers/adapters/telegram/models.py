"""Modelos do subconjunto de um Update do Telegram que o bot lê.

Campos desconhecidos são ignorados: o Bot API adiciona campos com frequência.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TelegramChat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    type: str  # private, group, supergroup, channel


class TelegramMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message_id: int
    chat: TelegramChat
    date: int | None = None
    text: str | None = None


class TelegramUpdate(BaseModel):
    """Update recebido via webhook ou getUpdates."""

    model_config = ConfigDict(extra="ignore")

    update_id: int
    message: TelegramMessage | None = None
    edited_message: TelegramMessage | None = None
