"""Long polling (getUpdates) como alternativa ao webhook.

Updates de um lote rodam em paralelo (sessões distintas não se bloqueiam;
a mesma sessão é serializada pelo store). Se algum update falhar por
indisponibilidade de store ou dedupe, o offset não passa dele e o lote é
buscado de novo após o backoff; os já processados caem no dedupe.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from connect_volunteers.application.inbound import process_update
from connect_volunteers.domain.protocols.dedupe import DedupeError
from connect_volunteers.domain.protocols.dialogue_store import DialogueStoreError
from connect_volunteers.infra.http import HttpClient, HttpError
from connect_volunteers.observability.logging import get_logger
from connect_volunteers.observability.middleware import bind_correlation_id

if TYPE_CHECKING:
    from connect_volunteers.application.session_driver import SessionDriver
    from connect_volunteers.domain.protocols.dedupe import DedupeStore

logger: logging.Logger = get_logger(__name__)

_RETRYABLE = (DialogueStoreError, DedupeError)


class TelegramUpdatePoller:
    """Busca updates e os entrega a `process_update`."""

    def __init__(
        self,
        http_client: HttpClient,
        bot_token: str,
        dedupe: DedupeStore,
        driver: SessionDriver,
        *,
        api_base_url: str = "https://api.telegram.org",
        timeout_seconds: int = 30,
        error_backoff_seconds: float = 5.0,
    ) -> None:
        self._http = http_client
        self._url = f"{api_base_url.rstrip('/')}/bot{bot_token}/getUpdates"
        self._dedupe = dedupe
        self._driver = driver
        self._timeout = timeout_seconds
        self._error_backoff = error_backoff_seconds
        self.offset: int | None = None
        # updates do último lote que falharam por store/dedupe indisponível
        self.failed_updates = 0

    async def fetch(self) -> list[dict[str, Any]]:
        payload: dict[str, Any] = {"timeout": self._timeout, "allowed_updates": ["message"]}
        if self.offset is not None:
            payload["offset"] = self.offset
        response = await self._http.post(self._url, json=payload)
        body = response.json()
        if not body.get("ok", False):
            raise HttpError(f"getUpdates rejected: {body.get('description')}")
        return list(body.get("result", []))

    async def _process_one(self, payload: dict[str, Any]) -> None:
        bind_correlation_id()
        await process_update(payload, self._dedupe, self._driver)

    async def poll_once(self) -> int:
        """Processa um lote; retorna quantos updates foram recebidos."""
        self.failed_updates = 0
        updates = await self.fetch()
        if not updates:
            return 0

        results = await asyncio.gather(
            *(self._process_one(u) for u in updates), return_exceptions=True
        )

        failed: list[int] = []
        for payload, result in zip(updates, results, strict=True):
            if not isinstance(result, BaseException):
                continue
            if isinstance(result, _RETRYABLE):
                failed.append(payload["update_id"])
                continue
            logger.error(
                "polling_update_failed",
                extra={"update_id": payload.get("update_id"), "error_type": type(result).__name__},
                exc_info=result,
            )

        self.failed_updates = len(failed)
        if failed:
            self.offset = min(failed)
            logger.warning(
                "polling_batch_partial_failure",
                extra={"failed": len(failed), "offset": self.offset},
            )
        else:
            self.offset = max(u["update_id"] for u in updates) + 1
        return len(updates)

    async def run(self, stop: asyncio.Event) -> None:
        """Loop até `stop` ser sinalizado."""
        logger.info("polling_started", extra={"timeout_seconds": self._timeout})
        while not stop.is_set():
            try:
                await self.poll_once()
            except HttpError as e:
                logger.warning(
                    "polling_fetch_failed",
                    extra={"status_code": e.status_code, "backoff_seconds": self._error_backoff},
                )
                await asyncio.sleep(self._error_backoff)
                continue
            if self.failed_updates:
                logger.warning(
                    "polling_backoff_after_failure",
                    extra={"failed": self.failed_updates, "backoff_seconds": self._error_backoff},
                )
                await asyncio.sleep(self._error_backoff)
        logger.info("polling_stopped")
