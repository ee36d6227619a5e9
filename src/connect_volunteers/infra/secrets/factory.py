from __future__ import annotations

import logging

from connect_volunteers.observability.logging import get_logger

from .env_provider import EnvSecretProvider
from .gcp_provider import SecretManagerProvider
from .protocol import SecretProvider

logger: logging.Logger = get_logger(__name__)

# Nome no Secret Manager → atributo em Settings
BOT_SECRET_MAPPINGS: dict[str, str] = {
    "TELEGRAM_BOT_TOKEN": "telegram_bot_token",
    "TELEGRAM_WEBHOOK_SECRET": "telegram_webhook_secret",
    "GOOGLE_SHEETS_CREDENTIALS_JSON": "google_sheets_credentials_json",
}


def create_secret_provider(backend: str = "env", project_id: str | None = None) -> SecretProvider:
    if backend == "env":
        return EnvSecretProvider()

    if backend == "secret_manager":
        if not project_id:
            raise ValueError("secret_manager requer project_id (GOOGLE_CLOUD_PROJECT)")
        logger.info("secret_provider_selected", extra={"project_id": project_id})
        return SecretManagerProvider(project_id)

    raise ValueError(f"Backend de secrets não reconhecido: {backend}")


def load_bot_secrets(provider: SecretProvider, current: dict[str, str | None]) -> dict[str, str]:
    """Busca no provider os segredos ainda não definidos.

    `current` mapeia atributo de Settings → valor atual. Retorna apenas os
    atributos encontrados na fonte.
    """
    found: dict[str, str] = {}
    for secret_name, attr_name in BOT_SECRET_MAPPINGS.items():
        if current.get(attr_name):
            continue
        value = provider.read(secret_name)
        if value is not None:
            found[attr_name] = value
    return found
