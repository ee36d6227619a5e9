"""LedgerSink sobre Google Sheets (values:append).

Cada categoria tem sua planilha; cada commit vira uma linha
(nome, telefone, endereço, comentário, timestamp) anexada ao final.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from connect_volunteers.domain.enums import RequestCategory
from connect_volunteers.domain.models import CompletedRecord
from connect_volunteers.domain.protocols.ledger_sink import LedgerSink, LedgerSinkError
from connect_volunteers.infra.http import HttpClient, HttpError, create_http_client
from connect_volunteers.observability.logging import get_logger

if TYPE_CHECKING:
    from connect_volunteers.config.destinations import LedgerDestinations
    from connect_volunteers.config.settings import Settings
    from connect_volunteers.infra.google_auth import ServiceAccountTokenProvider

logger: logging.Logger = get_logger(__name__)


def format_timestamp(timestamp: datetime) -> str:
    """Renderiza `YYYY-MM-DD HH:MM:SS+03:00` (offset do próprio datetime)."""
    base = timestamp.strftime("%Y-%m-%d %H:%M:%S")
    offset = timestamp.strftime("%z")
    if not offset:
        return base
    return f"{base}{offset[:3]}:{offset[3:5]}"


class GoogleSheetsLedgerSink(LedgerSink):
    """Anexa linhas via `spreadsheets.values.append` (USER_ENTERED)."""

    def __init__(
        self,
        http_client: HttpClient,
        token_provider: ServiceAccountTokenProvider,
        destinations: LedgerDestinations,
        *,
        base_url: str = "https://sheets.googleapis.com/v4",
        sheet_range: str = "Sheet1",
    ) -> None:
        self._http = http_client
        self._tokens = token_provider
        self._destinations = destinations
        self._base_url = base_url.rstrip("/")
        self._range = sheet_range

    @property
    def http_client(self) -> HttpClient:
        return self._http

    def _append_url(self, spreadsheet_id: str) -> str:
        return (
            f"{self._base_url}/spreadsheets/{spreadsheet_id}"
            f"/values/{quote(self._range, safe='')}:append"
        )

    async def append(
        self,
        category: RequestCategory,
        record: CompletedRecord,
        timestamp: datetime,
    ) -> None:
        spreadsheet_id = self._destinations.for_category(category)
        body: dict[str, Any] = {
            "majorDimension": "ROWS",
            "values": [record.as_row(format_timestamp(timestamp))],
        }

        try:
            token = await self._tokens.get_token()
            response = await self._http.post(
                self._append_url(spreadsheet_id),
                json=body,
                params={"valueInputOption": "USER_ENTERED", "includeValuesInResponse": "true"},
                headers={"Authorization": f"Bearer {token}"},
            )
        except HttpError as e:
            logger.error(
                "ledger_append_failed",
                extra={"category": category.value, "status_code": e.status_code},
            )
            raise LedgerSinkError(f"Sheets append failed: {e}") from e
        except Exception as e:
            # refresh de credenciais (google-auth) também cai aqui
            logger.error(
                "ledger_append_failed",
                extra={"category": category.value, "error_type": type(e).__name__},
            )
            raise LedgerSinkError(f"Sheets append failed: {type(e).__name__}") from e

        updated_range = response.json().get("updates", {}).get("updatedRange")
        logger.info(
            "ledger_row_appended",
            extra={"category": category.value, "sink": "sheets", "updated_range": updated_range},
        )


def create_sheets_ledger_sink(settings: Settings) -> GoogleSheetsLedgerSink:
    """Monta o sink a partir de Settings (credenciais + destinos)."""
    from connect_volunteers.infra.google_auth import ServiceAccountTokenProvider

    if not settings.google_sheets_credentials_json:
        raise ValueError("LEDGER_BACKEND=sheets requer GOOGLE_SHEETS_CREDENTIALS_JSON")

    http_client = create_http_client(
        settings,
        timeout_seconds=settings.sheets_request_timeout_seconds,
        max_retries=settings.sheets_max_retries,
        backoff_base_seconds=settings.sheets_retry_backoff_seconds,
    )
    return GoogleSheetsLedgerSink(
        http_client,
        ServiceAccountTokenProvider.from_json(settings.google_sheets_credentials_json),
        settings.ledger_destinations(),
        base_url=settings.sheets_api_base_url,
        sheet_range=settings.sheets_range,
    )
