"""Configurações da aplicação via variáveis de ambiente.

Todas as configurações são carregadas de env vars ou Secret Manager.
Nunca hardcode secrets ou valores sensíveis.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from connect_volunteers.config.destinations import LedgerDestinations
from connect_volunteers.domain.enums import RequestCategory
from connect_volunteers.infra.secrets import (
    BOT_SECRET_MAPPINGS,
    create_secret_provider,
    load_bot_secrets,
)
from connect_volunteers.observability.logging import get_logger

TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"
SHEETS_API_BASE_URL: str = "https://sheets.googleapis.com/v4"

_VALID_STORE_BACKENDS = {"memory", "redis"}
_VALID_LEDGER_BACKENDS = {"memory", "sheets"}


class Settings(BaseSettings):
    """Configurações lidas do ambiente."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    # Aplicação
    service_name: str = "connect_volunteers"
    version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"

    # Telegram Bot API
    telegram_bot_token: str | None = None  # Secret Manager em staging/prod
    telegram_webhook_secret: str | None = None  # X-Telegram-Bot-Api-Secret-Token
    telegram_api_base_url: str = TELEGRAM_API_BASE_URL
    telegram_request_timeout_seconds: float = 10.0
    telegram_max_retries: int = 2
    telegram_retry_backoff_seconds: float = 1.0
    telegram_polling_timeout_seconds: int = 30  # long polling do getUpdates

    # Estado de diálogo (precisa sobreviver a restarts)
    dialogue_store_backend: str = "memory"  # memory | redis
    redis_url: str | None = None
    dialogue_store_max_cas_retries: int = 16

    # Dedupe de updates (Telegram reenvia sem ACK)
    dedupe_backend: str = "memory"  # memory | redis
    dedupe_ttl_seconds: int = 86400

    # Ledger (uma planilha por categoria)
    ledger_backend: str = "memory"  # memory | sheets
    sheets_api_base_url: str = SHEETS_API_BASE_URL
    sheets_range: str = "Sheet1"
    sheets_request_timeout_seconds: float = 15.0
    sheets_max_retries: int = 2
    sheets_retry_backoff_seconds: float = 1.0
    google_sheets_credentials_json: str | None = None  # service account (Secret Manager)
    ledger_utc_offset_hours: int = 3  # horário de Kyiv usado nas planilhas

    spreadsheet_providing_driver: str | None = None
    spreadsheet_providing_collecting_humanitarian_help: str | None = None
    spreadsheet_providing_useful_contact: str | None = None
    spreadsheet_need_evacuation: str | None = None
    spreadsheet_need_humanitarian_help: str | None = None

    # Limites de I/O do driver (evento nunca fica pendurado)
    reply_timeout_seconds: float = 30.0
    ledger_timeout_seconds: float = 45.0

    @property
    def is_production(self) -> bool:
        return self.environment.lower() in ("production", "prod")

    @property
    def is_staging(self) -> bool:
        return self.environment.lower() in ("staging", "stage")

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local")

    def spreadsheet_ids(self) -> dict[RequestCategory, str | None]:
        """Tabela fixa categoria → atributo de configuração."""
        return {
            category: getattr(self, f"spreadsheet_{category.value}")
            for category in RequestCategory
        }

    def ledger_destinations(self) -> LedgerDestinations:
        """Constrói a tabela imutável de destinos (falha se faltar algum)."""
        return LedgerDestinations.from_mapping(self.spreadsheet_ids())

    def validate_dialogue_store_config(self) -> list[str]:
        """Valida backend do estado de diálogo por ambiente.

        Em staging/prod, memory é proibido (estado precisa sobreviver a restart).
        """
        errors: list[str] = []
        backend = self.dialogue_store_backend.lower()

        if backend not in _VALID_STORE_BACKENDS:
            errors.append(
                f"DIALOGUE_STORE_BACKEND '{backend}' inválido. "
                f"Valores válidos: {sorted(_VALID_STORE_BACKENDS)}"
            )
        if backend == "memory" and (self.is_staging or self.is_production):
            errors.append(
                "DIALOGUE_STORE_BACKEND=memory é proibido em staging/production. "
                "Configure 'redis' para estado durável."
            )
        if backend == "redis" and not self.redis_url:
            errors.append("DIALOGUE_STORE_BACKEND=redis requer REDIS_URL configurado")
        if self.dialogue_store_max_cas_retries < 1:
            errors.append("DIALOGUE_STORE_MAX_CAS_RETRIES deve ser >= 1")
        return errors

    def validate_dedupe_backend(self) -> list[str]:
        """Valida backend de dedupe (idempotência inbound)."""
        errors: list[str] = []
        backend = self.dedupe_backend.lower()
        if backend not in _VALID_STORE_BACKENDS:
            errors.append("DEDUPE_BACKEND inválido: use memory | redis")
        if backend == "memory" and (self.is_staging or self.is_production):
            errors.append("DEDUPE_BACKEND=memory é proibido em staging/production")
        if backend == "redis" and not self.redis_url:
            errors.append("DEDUPE_BACKEND=redis requer REDIS_URL configurado")
        return errors

    def validate_ledger_config(self) -> list[str]:
        """Valida backend do ledger e a tabela de destinos."""
        errors: list[str] = []
        backend = self.ledger_backend.lower()

        if backend not in _VALID_LEDGER_BACKENDS:
            errors.append(
                f"LEDGER_BACKEND '{backend}' inválido. "
                f"Valores válidos: {sorted(_VALID_LEDGER_BACKENDS)}"
            )
        if backend == "memory" and (self.is_staging or self.is_production):
            errors.append("LEDGER_BACKEND=memory é proibido em staging/production")

        if backend == "sheets":
            missing = [c.value for c, sid in self.spreadsheet_ids().items() if not sid]
            if missing:
                errors.append(
                    "LEDGER_BACKEND=sheets requer SPREADSHEET_* para: " + ", ".join(missing)
                )
            if not self.google_sheets_credentials_json:
                errors.append("LEDGER_BACKEND=sheets requer GOOGLE_SHEETS_CREDENTIALS_JSON")

        if not -12 <= self.ledger_utc_offset_hours <= 14:
            errors.append("LEDGER_UTC_OFFSET_HOURS deve estar entre -12 e 14")
        return errors

    def validate_timeouts(self) -> list[str]:
        """Toda I/O externa do driver precisa de timeout positivo."""
        errors: list[str] = []
        if self.reply_timeout_seconds <= 0:
            errors.append("REPLY_TIMEOUT_SECONDS deve ser > 0")
        if self.ledger_timeout_seconds <= 0:
            errors.append("LEDGER_TIMEOUT_SECONDS deve ser > 0")
        return errors

    def validate_telegram_config(self) -> list[str]:
        """Valida configurações mínimas do Telegram."""
        errors: list[str] = []
        if not self.telegram_bot_token:
            errors.append("TELEGRAM_BOT_TOKEN não configurado")
        if (self.is_staging or self.is_production) and not self.telegram_webhook_secret:
            errors.append("TELEGRAM_WEBHOOK_SECRET obrigatório em staging/production")
        return errors

    def validate_all(self) -> list[str]:
        """Agrega todas as validações de startup."""
        errors: list[str] = []
        errors.extend(self.validate_dialogue_store_config())
        errors.extend(self.validate_dedupe_backend())
        errors.extend(self.validate_ledger_config())
        errors.extend(self.validate_timeouts())
        errors.extend(self.validate_telegram_config())
        return errors

    def model_post_init(self, __context: Any) -> None:
        """Carrega secrets do Secret Manager em staging/production.

        - Development: secrets vêm de env vars
        - Staging/production: fail-closed se o Secret Manager falhar
        - Nunca logar valores de secrets
        """
        logger: logging.Logger = get_logger(__name__)

        if not (self.is_staging or self.is_production):
            logger.info(
                "Usando configuração local (secrets via env vars)",
                extra={"environment": self.environment},
            )
            return

        # PYTEST_CURRENT_TEST é setado pelo pytest; evita chamada real ao GCP
        if os.getenv("PYTEST_CURRENT_TEST"):
            logger.info(
                "Pulando Secret Manager em ambiente de teste controlado",
                extra={"environment": self.environment},
            )
            return

        project_id = os.getenv("GOOGLE_CLOUD_PROJECT")
        if not project_id:
            raise RuntimeError("GOOGLE_CLOUD_PROJECT obrigatório em staging/production")

        provider = create_secret_provider(backend="secret_manager", project_id=project_id)

        current = {attr: getattr(self, attr) for attr in BOT_SECRET_MAPPINGS.values()}
        for attr_name, value in load_bot_secrets(provider, current).items():
            setattr(self, attr_name, value)
            logger.info(
                "Secret carregado do Secret Manager",
                extra={"setting": attr_name, "environment": self.environment},
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Retorna uma instância cacheada de Settings."""
    return Settings()
