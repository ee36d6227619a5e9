"""Token OAuth2 de service account para a API do Google Sheets.

A biblioteca google-auth é síncrona; o refresh roda numa thread para não
bloquear o event loop. O token é reaproveitado até expirar.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from google.auth.transport.requests import Request
from google.oauth2.service_account import Credentials

from connect_volunteers.observability.logging import get_logger

logger: logging.Logger = get_logger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class ServiceAccountTokenProvider:
    """Fornece access tokens a partir do JSON da service account."""

    def __init__(self, credentials: Any) -> None:
        self._credentials = credentials
        self._lock = asyncio.Lock()

    @classmethod
    def from_json(cls, credentials_json: str) -> ServiceAccountTokenProvider:
        """Cria provider a partir do conteúdo (não caminho) do JSON."""
        info = json.loads(credentials_json)
        credentials = Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
        return cls(credentials)

    async def get_token(self) -> str:
        """Retorna token válido, renovando se necessário."""
        async with self._lock:
            if not self._credentials.valid:
                await asyncio.to_thread(self._credentials.refresh, Request())
                logger.info("Token da service account renovado")
            return self._credentials.token
