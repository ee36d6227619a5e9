"""Validação do secret token do webhook Telegram."""

from __future__ import annotations

import hmac
from collections.abc import Mapping
from dataclasses import dataclass

SECRET_TOKEN_HEADER = "x-telegram-bot-api-secret-token"


@dataclass(slots=True)
class SecretTokenResult:
    """Resultado da validação do secret token."""

    valid: bool
    skipped: bool = False
    error: str | None = None


def verify_telegram_secret(
    headers: Mapping[str, str],
    secret: str | None,
) -> SecretTokenResult:
    """Compara o header enviado pelo Telegram com o secret configurado.

    Se o secret estiver ausente, a validação é ignorada (skipped).
    """

    if not secret:
        return SecretTokenResult(valid=True, skipped=True)

    received = headers.get(SECRET_TOKEN_HEADER)
    if not received:
        return SecretTokenResult(valid=False, error="missing_secret_token")

    if not hmac.compare_digest(received.encode("utf-8"), secret.encode("utf-8")):
        return SecretTokenResult(valid=False, error="secret_token_mismatch")

    return SecretTokenResult(valid=True)
